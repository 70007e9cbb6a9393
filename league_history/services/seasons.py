# league_history/services/seasons.py
from __future__ import annotations

import logging
import os
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import (
    SeasonValidationError,
    StorageError,
    TeamNotFound,
    WeekAlreadyExists,
    WeekNotFound,
)
from ..logic.standings_engine import StandingsResult, recompute
from ..models import Matchup, Season, Team, Week
from ..store import SeasonStore
from .weeks import parse_week_number, playoff_week_templates

PLAYOFF_START_WEEK = int(os.getenv("PLAYOFF_START_WEEK", "15"))

logger = logging.getLogger("league_history.seasons")

__all__ = [
    "PLAYOFF_START_WEEK",
    "list_years",
    "get_season",
    "get_weeks",
    "get_week",
    "get_standings",
    "submit_week_edit",
    "create_week",
    "create_season",
    "replace_roster",
    "update_team",
    "add_playoff_weeks",
    "all_time_table",
]


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _validate_week_number(week_number: int) -> None:
    if week_number < 1:
        raise SeasonValidationError(f"Week number must be >= 1, got {week_number}")


def _validate_roster(teams: Sequence[Team]) -> None:
    if not teams:
        raise SeasonValidationError("Season has no team roster")
    seen: set[str] = set()
    for t in teams:
        if t.id in seen:
            raise SeasonValidationError(f"Duplicate team id {t.id!r} in roster")
        seen.add(t.id)


def _week_keys(season: Season, week_number: int) -> List[str]:
    return [k for k in season.weeks if parse_week_number(k) == week_number]


def _refresh_standings(season: Season, year: str) -> StandingsResult:
    """Recompute in place; the caller persists season and standings together."""
    result = recompute(season.teams, season.weeks, season.standings, PLAYOFF_START_WEEK)
    for w in result.warnings:
        logger.warning("season %s: %s", year, w)
    season.standings = result.rows
    return result


# ---------------------------------------------------------------------------
# reads
# ---------------------------------------------------------------------------


def list_years(store: SeasonStore) -> List[str]:
    return store.list_years()


def get_season(store: SeasonStore, year: str) -> Season:
    return store.get_season(year)


def get_weeks(store: SeasonStore, year: str) -> Season:
    """Weeks are returned alongside the roster so callers can resolve team ids."""
    return store.get_season(year)


def get_week(store: SeasonStore, year: str, week_number: int) -> Week:
    season = store.get_season(year)
    keys = _week_keys(season, week_number)
    if not keys:
        raise WeekNotFound(year, week_number)
    return season.weeks[keys[0]]


def get_standings(store: SeasonStore, year: str) -> StandingsResult:
    """
    Recompute on read from the current weeks, so stale persisted standings
    never leak out. Nothing is written.
    """
    season = store.get_season(year)
    if not season.teams:
        return StandingsResult(rows=[])
    try:
        return recompute(season.teams, season.weeks, season.standings, PLAYOFF_START_WEEK)
    except SeasonValidationError as exc:
        # edits validate the roster, so a bad one here came from the file itself
        logger.error("season %s: stored roster is invalid: %s", year, exc)
        raise StorageError(f"Season {year} has an invalid roster") from exc


# ---------------------------------------------------------------------------
# edits (each one recomputes and persists season + standings in one write)
# ---------------------------------------------------------------------------


def submit_week_edit(
    store: SeasonStore, year: str, week_number: int, matchups: Sequence[Matchup]
) -> StandingsResult:
    """
    Fully replace one week's matchups, recompute standings, persist both.
    Re-submitting the same matchups yields the same standings.
    """
    _validate_week_number(week_number)
    out: Dict[str, StandingsResult] = {}

    def _on_change(season: Season) -> None:
        out["result"] = _refresh_standings(season, year)

    store.put_week(year, week_number, matchups, on_change=_on_change)
    logger.info("season %s week %s saved (%d matchups)", year, week_number, len(matchups))
    return out["result"]


def create_week(
    store: SeasonStore, year: str, week_number: int, matchups: Sequence[Matchup]
) -> StandingsResult:
    """Like submit_week_edit, but refuses to overwrite an existing week."""
    _validate_week_number(week_number)
    out: Dict[str, StandingsResult] = {}

    def _apply(season: Season) -> None:
        if _week_keys(season, week_number):
            raise WeekAlreadyExists(year, week_number)
        season.weeks[str(week_number)] = Week(matchups=list(matchups))
        out["result"] = _refresh_standings(season, year)

    store.modify(year, _apply)
    logger.info("season %s week %s created", year, week_number)
    return out["result"]


def create_season(store: SeasonStore, year: str, teams: Sequence[Team]) -> StandingsResult:
    _validate_roster(teams)
    season = Season(teams=list(teams))
    result = _refresh_standings(season, year)
    store.create_season(year, season)
    logger.info("season %s created with %d teams", year, len(teams))
    return result


def replace_roster(store: SeasonStore, year: str, teams: Sequence[Team]) -> StandingsResult:
    _validate_roster(teams)
    out: Dict[str, StandingsResult] = {}

    def _apply(season: Season) -> None:
        season.teams = list(teams)
        out["result"] = _refresh_standings(season, year)

    store.modify(year, _apply)
    logger.info("season %s roster replaced (%d teams)", year, len(teams))
    return out["result"]


def update_team(store: SeasonStore, year: str, team_id: str, changes: Dict[str, Any]) -> Team:
    """
    Administrator metadata edit for one roster entry. Championship flags and
    the playoff record are also written onto the team's standing row, since
    recompute carries those forward from the prior row.
    """
    changes = {k: v for k, v in changes.items() if k != "id"}
    out: Dict[str, Team] = {}

    def _apply(season: Season) -> None:
        for idx, t in enumerate(season.teams):
            if t.id == team_id:
                break
        else:
            raise TeamNotFound(year, team_id)

        updated = Team.model_validate({**t.model_dump(), **changes})
        season.teams[idx] = updated
        for row in season.standings:
            if row.team_id == team_id:
                row.regular_season_champion = updated.regular_season_champion
                row.playoff = updated.playoff.model_copy()
        _refresh_standings(season, year)
        out["team"] = updated

    store.modify(year, _apply)
    logger.info("season %s team %s updated: %s", year, team_id, sorted(changes))
    return out["team"]


def add_playoff_weeks(store: SeasonStore, year: str) -> Tuple[List[int], List[int]]:
    """
    Add the playoff bracket weeks that do not exist yet. Existing weeks are
    left untouched. Returns (added, skipped) week numbers.
    """
    added: List[int] = []
    skipped: List[int] = []

    def _apply(season: Season) -> None:
        for num, week in playoff_week_templates(PLAYOFF_START_WEEK):
            if _week_keys(season, num):
                skipped.append(num)
                continue
            season.weeks[str(num)] = week
            added.append(num)
        if season.teams:
            _refresh_standings(season, year)

    store.modify(year, _apply)
    logger.info("season %s playoff weeks added=%s skipped=%s", year, added, skipped)
    return added, skipped


# ---------------------------------------------------------------------------
# all-time table
# ---------------------------------------------------------------------------


def all_time_table(store: SeasonStore, states: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
    """
    Career totals per owner across every season, from each season's
    freshly recomputed standings.
    A playoff title counts as one extra playoff round.
    """
    wanted = set(states) if states is not None else None
    acc: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {
            "seasons": 0,
            "wins": 0,
            "losses": 0,
            "ties": 0,
            "points_for": 0.0,
            "points_against": 0.0,
            "regular_season_titles": 0,
            "playoff_rounds": 0,
            "playoff_titles": 0,
        }
    )

    for year in store.list_years():
        for row in get_standings(store, year).rows:
            if wanted is not None and row.state not in wanted:
                continue
            owner = row.owner_name or row.display_name or row.team_id
            a = acc[owner]
            a["seasons"] += 1
            a["wins"] += row.wins
            a["losses"] += row.losses
            a["ties"] += row.ties
            a["points_for"] += row.points_for
            a["points_against"] += row.points_against
            if row.regular_season_champion:
                a["regular_season_titles"] += 1
            if row.playoff.made:
                a["playoff_rounds"] += row.playoff.rounds + (1 if row.playoff.champion else 0)
            if row.playoff.champion:
                a["playoff_titles"] += 1

    table: List[Dict[str, Any]] = []
    for owner, a in acc.items():
        gp = a["wins"] + a["losses"] + a["ties"]
        table.append(
            {
                "owner_name": owner,
                **a,
                "games_played": gp,
                "win_pct": (a["wins"] + 0.5 * a["ties"]) / gp if gp > 0 else 0.0,
                "points_per_game": a["points_for"] / gp if gp > 0 else 0.0,
                "points_against_per_game": a["points_against"] / gp if gp > 0 else 0.0,
            }
        )

    table.sort(key=lambda r: (-r["win_pct"], -r["points_for"], r["owner_name"]))
    return table
