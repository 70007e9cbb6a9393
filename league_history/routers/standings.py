# league_history/routers/standings.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import schemas
from ..errors import LeagueHistoryError
from ..services import seasons as svc
from ..store import SeasonStore, get_store
from .http_errors import http_error

route = APIRouter(prefix="/api/seasons", tags=["standings"])


@route.get("/{year}/standings", operation_id="standings_get", response_model=schemas.StandingsOut)
def get_standings(year: str, store: SeasonStore = Depends(get_store)):
    """
    Standings recomputed from the season's current weeks (not persisted).
    Rows come back in rank order:
      wins → points for → roster order
    previous_rank is the ordering before the last scored regular-season week.
    """
    try:
        result = svc.get_standings(store, year)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.StandingsOut(
        year=year,
        standings=result.rows,
        warnings=result.warnings,
        checkpoint_week=result.checkpoint_week,
    )
