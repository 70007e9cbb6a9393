# league_history/services/weeks.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Tuple

from ..models import BYE, Matchup, Phase, Week

__all__ = [
    "parse_week_number",
    "ordered_weeks",
    "bucket_for",
    "playoff_week_templates",
]

# ---------------------------------------------------------------------------
# Week utilities
# - Week keys are strings in the persisted document ("1", "2", ... "17")
# - Weeks at/after the playoff-start week are playoff weeks
# ---------------------------------------------------------------------------


def parse_week_number(key: object) -> int | None:
    """
    Parse a week key into an int. Returns None for anything non-numeric.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    try:
        return int(str(key).strip())
    except (TypeError, ValueError):
        return None


def ordered_weeks(weeks: Mapping[str, Week]) -> List[Tuple[int, Week]]:
    """
    Return (week_number, week) pairs sorted ascending by week number.
    Non-numeric keys are dropped. Keys that parse to the same number
    ("1" and "01") keep their key order as a secondary sort.
    """
    parsed = []
    for key, week in weeks.items():
        num = parse_week_number(key)
        if num is None:
            continue
        parsed.append((num, str(key), week))
    parsed.sort(key=lambda t: (t[0], t[1]))
    return [(num, week) for num, _, week in parsed]


def bucket_for(week_number: int, matchup: Matchup, playoff_start_week: int) -> Phase:
    """
    Which stat bucket a matchup's points land in.
    Before the playoff-start week everything is REGULAR. From then on the
    matchup's own phase decides; unlabeled (or 'regular') games are dead rubbers.
    """
    if week_number < playoff_start_week:
        return Phase.REGULAR
    if matchup.phase in (Phase.PLAYOFF, Phase.CONSOLATION):
        return matchup.phase
    return Phase.DEAD_RUBBER


# ---------------------------------------------------------------------------
# Playoff bracket templates
# 6-team championship bracket with byes for the top two seeds, a 4-team
# consolation ladder for the bottom seeds, and placement games for the rest.
# ---------------------------------------------------------------------------

_BRACKET: Tuple[Tuple[Tuple[Phase, str, bool], ...], ...] = (
    (
        (Phase.PLAYOFF, "#1 SEED vs BYE", True),
        (Phase.PLAYOFF, "#4 SEED vs #5 SEED", False),
        (Phase.PLAYOFF, "#3 SEED vs #6 SEED", False),
        (Phase.PLAYOFF, "#2 SEED vs BYE", True),
        (Phase.CONSOLATION, "#9 SEED vs #12 SEED", False),
        (Phase.CONSOLATION, "#10 SEED vs #11 SEED", False),
        (Phase.DEAD_RUBBER, "#7 SEED vs #8 SEED", False),
    ),
    (
        (Phase.PLAYOFF, "#1 SEED vs winner #4/#5", False),
        (Phase.PLAYOFF, "#2 SEED vs winner #3/#6", False),
        (Phase.CONSOLATION, "loser #9/#12 vs loser #10/#11 - Toilet Bowl", False),
        (Phase.DEAD_RUBBER, "loser #4/#5 vs loser #3/#6", False),
        (Phase.DEAD_RUBBER, "#7 SEED vs winner #10/#11", False),
        (Phase.DEAD_RUBBER, "#8 SEED vs winner #9/#12", False),
    ),
    (
        (Phase.PLAYOFF, "Winner Matchup 1 vs Winner Matchup 2 - Championship", False),
        (Phase.DEAD_RUBBER, "Loser Matchup 1 vs Loser Matchup 2 - Third Place", False),
        (Phase.DEAD_RUBBER, "Winner Matchup 3 vs Winner Matchup 4", False),
        (Phase.DEAD_RUBBER, "Winner Matchup 5 vs Loser Matchup 6", False),
        (Phase.DEAD_RUBBER, "Loser Matchup 5 vs Winner Matchup 6", False),
        (Phase.DEAD_RUBBER, "Loser Matchup 3 vs Loser Matchup 4", False),
    ),
)


def playoff_week_templates(playoff_start_week: int) -> Iterable[Tuple[int, Week]]:
    """
    Yield (week_number, Week) for each round of the playoff bracket, starting at
    playoff_start_week. Team slots are unassigned and scores unset.
    """
    for offset, games in enumerate(_BRACKET):
        matchups = [
            Matchup(team_b=BYE if bye else None, phase=phase, label=label)
            for phase, label, bye in games
        ]
        yield playoff_start_week + offset, Week(matchups=matchups)
