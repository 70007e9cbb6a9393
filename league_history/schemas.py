# league_history/schemas.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import Matchup, MembershipState, PlayoffRecord, StandingRow, Team, Week


# -----------------------
# Seasons / Roster
# -----------------------
class SeasonCreate(BaseModel):
    teams: list[Team]


class RosterIn(BaseModel):
    teams: list[Team]


class RosterOut(BaseModel):
    teams: list[Team]


class TeamUpdate(BaseModel):
    """Partial metadata edit; only fields that are sent are applied."""

    display_name: str | None = None
    owner_name: str | None = None
    state: MembershipState | None = None
    playoff: PlayoffRecord | None = None
    regular_season_champion: bool | None = None

    model_config = ConfigDict(use_enum_values=True)


# -----------------------
# Weeks
# -----------------------
class WeekEditIn(BaseModel):
    matchups: list[Matchup]


class WeeksOut(BaseModel):
    weeks: dict[str, Week]
    teams: list[Team]


class WeekEditOut(BaseModel):
    success: bool = True
    week: int
    standings: list[StandingRow]
    warnings: list[str] = Field(default_factory=list)


class PlayoffWeeksOut(BaseModel):
    added: list[int]
    skipped: list[int]


# -----------------------
# Standings
# -----------------------
class StandingsOut(BaseModel):
    year: str
    standings: list[StandingRow]
    warnings: list[str] = Field(default_factory=list)
    checkpoint_week: int | None = None


class AllTimeRow(BaseModel):
    owner_name: str
    seasons: int
    wins: int
    losses: int
    ties: int
    games_played: int
    points_for: float
    points_against: float
    win_pct: float
    points_per_game: float
    points_against_per_game: float
    regular_season_titles: int
    playoff_rounds: int
    playoff_titles: int
