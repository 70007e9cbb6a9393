# league_history/models.py
from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils.num import parse_score

# Placeholder opponent; never resolves to a roster team.
BYE = "BYE"


# -----------------------
# Enums
# -----------------------
class MembershipState(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    LEGACY = "legacy"
    UNOWNED = "unowned"


class Phase(str, enum.Enum):
    REGULAR = "regular"
    PLAYOFF = "playoff"
    CONSOLATION = "consolation"
    DEAD_RUBBER = "dead_rubber"


# Playoff-week buckets, in display order
POSTSEASON_PHASES: tuple[Phase, ...] = (Phase.PLAYOFF, Phase.CONSOLATION, Phase.DEAD_RUBBER)

# Labels found in older season files
_PHASE_ALIASES = {
    "toilet": Phase.CONSOLATION.value,
    "toilet_bowl": Phase.CONSOLATION.value,
    "out": Phase.DEAD_RUBBER.value,
    "dead_rubber": Phase.DEAD_RUBBER.value,
}


# -----------------------
# Roster
# -----------------------
class PlayoffRecord(BaseModel):
    made: bool = False
    rounds: int = 0
    champion: bool = False


class Team(BaseModel):
    id: str = Field(..., min_length=1)
    display_name: str = ""
    owner_name: str = ""
    state: MembershipState = MembershipState.ACTIVE
    playoff: PlayoffRecord = Field(default_factory=PlayoffRecord)
    regular_season_champion: bool = False

    @field_validator("id")
    @classmethod
    def _id_is_not_bye(cls, v: str) -> str:
        if v == BYE:
            raise ValueError(f"{BYE!r} is reserved for bye slots")
        return v


# -----------------------
# Schedule
# -----------------------
class Matchup(BaseModel):
    """
    One scheduled game. team_a/team_b hold a roster team id, BYE, or None
    when the slot is still unassigned. A score of None means "not played yet".
    """

    team_a: str | None = None
    team_b: str | None = None
    score_a: float | None = None
    score_b: float | None = None
    phase: Phase | None = None
    label: str | None = None

    @field_validator("team_a", "team_b", mode="before")
    @classmethod
    def _blank_team_is_unassigned(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("score_a", "score_b", mode="before")
    @classmethod
    def _coerce_score(cls, v: Any) -> float | None:
        return parse_score(v)

    @field_validator("phase", mode="before")
    @classmethod
    def _normalize_phase(cls, v: Any) -> Any:
        if isinstance(v, str):
            key = v.strip().lower().replace("-", "_").replace(" ", "_")
            if not key:
                return None
            return _PHASE_ALIASES.get(key, key)
        return v


class Week(BaseModel):
    matchups: list[Matchup] = Field(default_factory=list)


# -----------------------
# Standings
# -----------------------
class PhaseTotals(BaseModel):
    points_for: float = 0.0
    points_against: float = 0.0


class StandingRow(BaseModel):
    """
    Derived per-team record. Everything except the carried metadata
    (regular_season_champion, playoff) is recomputed from the weeks.
    """

    model_config = ConfigDict(use_enum_values=True)

    team_id: str
    display_name: str = ""
    owner_name: str = ""
    state: MembershipState = MembershipState.ACTIVE
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    point_diff: float = 0.0
    win_pct: float = 0.0
    rank: int = 0
    previous_rank: int = 0
    rank_change: int = 0
    phase_totals: dict[str, PhaseTotals] = Field(default_factory=dict)

    # carried forward by team id
    regular_season_champion: bool = False
    playoff: PlayoffRecord = Field(default_factory=PlayoffRecord)


# -----------------------
# Season document
# -----------------------
class Season(BaseModel):
    teams: list[Team] = Field(default_factory=list)
    weeks: dict[str, Week] = Field(default_factory=dict)
    standings: list[StandingRow] = Field(default_factory=list)
