# league_history/routers/seasons.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import schemas
from ..errors import LeagueHistoryError
from ..models import Season
from ..services import seasons as svc
from ..store import SeasonStore, get_store
from .http_errors import http_error

route = APIRouter(prefix="/api/seasons", tags=["seasons"])


@route.get("", operation_id="seasons_list")
def list_years(store: SeasonStore = Depends(get_store)) -> dict:
    """Return {"years": [...]} in ascending order."""
    try:
        return {"years": svc.list_years(store)}
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc


@route.get("/{year}", operation_id="seasons_get", response_model=Season)
def get_season(year: str, store: SeasonStore = Depends(get_store)):
    try:
        return svc.get_season(store, year)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc


@route.post("/{year}", operation_id="seasons_create", response_model=schemas.StandingsOut)
def create_season(year: str, payload: schemas.SeasonCreate, store: SeasonStore = Depends(get_store)):
    """
    Initialize a season from its roster. Weeks start empty, standings all zero.
    409 if the year already exists.
    """
    try:
        result = svc.create_season(store, year, payload.teams)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.StandingsOut(year=year, standings=result.rows, warnings=result.warnings)
