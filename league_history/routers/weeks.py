# league_history/routers/weeks.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from .. import schemas
from ..errors import LeagueHistoryError
from ..models import Week
from ..services import seasons as svc
from ..store import SeasonStore, get_store
from .http_errors import http_error

route = APIRouter(prefix="/api/seasons", tags=["weeks"])


@route.get("/{year}/weeks", operation_id="weeks_list", response_model=schemas.WeeksOut)
def get_weeks(year: str, store: SeasonStore = Depends(get_store)):
    """All weeks of a season plus the roster, e.g. for the edit page dropdowns."""
    try:
        season = svc.get_weeks(store, year)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.WeeksOut(weeks=season.weeks, teams=season.teams)


@route.get("/{year}/weeks/{week}", operation_id="weeks_get", response_model=Week)
def get_week(year: str, week: int, store: SeasonStore = Depends(get_store)):
    try:
        return svc.get_week(store, year, week)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc


@route.put("/{year}/weeks/{week}", operation_id="weeks_submit_edit", response_model=schemas.WeekEditOut)
def submit_week_edit(
    year: str,
    week: int,
    payload: schemas.WeekEditIn,
    store: SeasonStore = Depends(get_store),
):
    """
    Replace the week's matchups (not a merge), recompute standings and persist
    both before answering. Unknown team references come back as warnings.
    """
    try:
        result = svc.submit_week_edit(store, year, week, payload.matchups)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.WeekEditOut(week=week, standings=result.rows, warnings=result.warnings)


@route.post("/{year}/weeks/{week}", operation_id="weeks_create", response_model=schemas.WeekEditOut)
def create_week(
    year: str,
    week: int,
    payload: schemas.WeekEditIn,
    store: SeasonStore = Depends(get_store),
):
    try:
        result = svc.create_week(store, year, week, payload.matchups)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.WeekEditOut(week=week, standings=result.rows, warnings=result.warnings)


@route.post("/{year}/playoff-weeks", operation_id="weeks_add_playoffs", response_model=schemas.PlayoffWeeksOut)
def add_playoff_weeks(year: str, store: SeasonStore = Depends(get_store)):
    """Add the bracket weeks (unassigned, unscored). Existing weeks are skipped."""
    try:
        added, skipped = svc.add_playoff_weeks(store, year)
    except LeagueHistoryError as exc:
        raise http_error(exc) from exc
    return schemas.PlayoffWeeksOut(added=added, skipped=skipped)
