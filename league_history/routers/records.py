# league_history/routers/records.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from .. import schemas
from ..errors import LeagueHistoryError
from ..services import seasons as svc
from ..store import SeasonStore, get_store
from .http_errors import http_error

router = APIRouter(prefix="/api/records", tags=["records"])


@router.get("/all-time", response_model=list[schemas.AllTimeRow])
def all_time(states: Optional[str] = None, store: SeasonStore = Depends(get_store)):
    """
    Career table across every season, one row per owner.
    Query:
      - states: optional comma-separated membership states to include
                (e.g. "active,legacy"). Omitted => everyone.
    """
    wanted = [s.strip() for s in states.split(",") if s.strip()] if states else None
    try:
        return svc.all_time_table(store, wanted)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
