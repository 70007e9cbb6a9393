# league_history/routers/teams.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import schemas
from ..errors import LeagueHistoryError
from ..models import Team
from ..services import seasons as svc
from ..store import SeasonStore, get_store
from .http_errors import http_error

route = APIRouter(prefix="/api/seasons", tags=["teams"])


@route.get("/{year}/teams", operation_id="teams_list", response_model=schemas.RosterOut)
def get_teams(year: str, store: SeasonStore = Depends(get_store)):
    try:
        season = svc.get_season(store, year)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.RosterOut(teams=season.teams)


@route.put("/{year}/teams", operation_id="teams_replace", response_model=schemas.StandingsOut)
def replace_teams(year: str, payload: schemas.RosterIn, store: SeasonStore = Depends(get_store)):
    """Replace the whole roster; standings are recomputed against it."""
    try:
        result = svc.replace_roster(store, year, payload.teams)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.StandingsOut(year=year, standings=result.rows, warnings=result.warnings)


@route.patch("/{year}/teams/{team_id}", operation_id="teams_update", response_model=Team)
def update_team(
    year: str,
    team_id: str,
    payload: schemas.TeamUpdate,
    store: SeasonStore = Depends(get_store),
):
    """Metadata edit: names, membership state, championship flags, playoff record."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        return svc.update_team(store, year, team_id, changes)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
