# league_history/logic/standings_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypedDict

from ..errors import SeasonValidationError
from ..models import (
    BYE,
    POSTSEASON_PHASES,
    Matchup,
    Phase,
    PhaseTotals,
    StandingRow,
    Team,
    Week,
)
from ..services.weeks import bucket_for, ordered_weeks

DEFAULT_PLAYOFF_START_WEEK = 15


# TypedDict so the mixed accumulator types stay explicit
class _StatRow(TypedDict):
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float


@dataclass
class StandingsResult:
    rows: List[StandingRow]
    warnings: List[str] = field(default_factory=list)
    # week after which previous_rank was captured (None => no checkpoint)
    checkpoint_week: Optional[int] = None


def _new_stat() -> _StatRow:
    return _StatRow(wins=0, losses=0, ties=0, points_for=0.0, points_against=0.0)


def is_played(m: Matchup) -> bool:
    """Both scores present. 0-0 counts (as a tie); one missing score never does."""
    return m.score_a is not None and m.score_b is not None


def _resolve_pair(m: Matchup, roster: Mapping[str, int]) -> Tuple[Optional[str], Optional[str]]:
    a = m.team_a if m.team_a != BYE and m.team_a in roster else None
    b = m.team_b if m.team_b != BYE and m.team_b in roster else None
    if a is not None and a == b:
        return None, None
    return a, b


def _unknown_refs(
    scheduled: Iterable[Tuple[int, Week]], roster: Mapping[str, int]
) -> List[str]:
    warnings: List[str] = []
    for num, week in scheduled:
        for idx, m in enumerate(week.matchups, start=1):
            for ref in (m.team_a, m.team_b):
                if ref is None or ref == BYE or ref in roster:
                    continue
                warnings.append(f"week {num} matchup {idx}: unknown team reference {ref!r} skipped")
            if m.team_a is not None and m.team_a in roster and m.team_a == m.team_b:
                warnings.append(f"week {num} matchup {idx}: team {m.team_a!r} paired with itself skipped")
    return warnings


def _accumulate_points(a: _StatRow | Dict[str, float], b: _StatRow | Dict[str, float], m: Matchup) -> None:
    # points count whenever a score is present, even if the other side is unset
    if m.score_a is not None:
        a["points_for"] += m.score_a
        b["points_against"] += m.score_a
    if m.score_b is not None:
        b["points_for"] += m.score_b
        a["points_against"] += m.score_b


def _accumulate_result(a: _StatRow, b: _StatRow, m: Matchup) -> None:
    sa = float(m.score_a)  # type: ignore[arg-type]
    sb = float(m.score_b)  # type: ignore[arg-type]
    if sa > sb:
        a["wins"] += 1
        b["losses"] += 1
    elif sb > sa:
        b["wins"] += 1
        a["losses"] += 1
    else:
        a["ties"] += 1
        b["ties"] += 1


def _ordering(roster: Mapping[str, int], stat: Mapping[str, _StatRow]) -> List[str]:
    """
    Wins desc, then points for desc. Anything still level keeps roster order,
    so the result never depends on dict or sort internals.
    """
    return sorted(
        roster.keys(),
        key=lambda tid: (-stat[tid]["wins"], -stat[tid]["points_for"], roster[tid]),
    )


def _rank_map(order: Sequence[str]) -> Dict[str, int]:
    return {tid: i for i, tid in enumerate(order, start=1)}


def recompute(
    teams: Sequence[Team],
    weeks: Mapping[str, Week],
    prior_standings: Iterable[StandingRow] = (),
    playoff_start_week: int = DEFAULT_PLAYOFF_START_WEEK,
) -> StandingsResult:
    """
    Derive a season's standings table from its roster and week map.

      1) Zeroed regular bucket per team, plus playoff/consolation/dead_rubber
         point buckets for weeks at/after playoff_start_week.
      2) Scored weeks = weeks with at least one played matchup between two
         roster teams, ascending by week number.
      3) For each scored week: points go to the matchup's bucket; W/L/T only
         for played matchups in the regular bucket. After the second-to-last
         regular scored week, the current ordering is captured as previous_rank.
      4) Order by wins, points for, roster order; dense ranks 1..N.
      5) Carry championship / playoff metadata forward from prior rows by team id.

    Pure: no I/O, no mutation of the inputs.
    """
    if not teams:
        raise SeasonValidationError("Season has no team roster")

    roster: Dict[str, int] = {}
    for idx, t in enumerate(teams):
        if t.id in roster:
            raise SeasonValidationError(f"Duplicate team id {t.id!r} in roster")
        roster[t.id] = idx

    regular: Dict[str, _StatRow] = {tid: _new_stat() for tid in roster}
    postseason: Dict[str, Dict[str, Dict[str, float]]] = {
        tid: {p.value: {"points_for": 0.0, "points_against": 0.0} for p in POSTSEASON_PHASES}
        for tid in roster
    }

    scheduled = ordered_weeks(weeks)
    warnings = _unknown_refs(scheduled, roster)

    def _week_is_scored(week: Week) -> bool:
        for m in week.matchups:
            a, b = _resolve_pair(m, roster)
            if a is not None and b is not None and is_played(m):
                return True
        return False

    scored = [(num, week) for num, week in scheduled if _week_is_scored(week)]

    regular_positions = [i for i, (num, _) in enumerate(scored) if num < playoff_start_week]
    checkpoint_pos = regular_positions[-2] if len(regular_positions) >= 2 else None

    previous: Dict[str, int] = {}
    checkpoint_week: Optional[int] = None

    for pos, (num, week) in enumerate(scored):
        for m in week.matchups:
            a, b = _resolve_pair(m, roster)
            if a is None or b is None:
                continue
            bucket = bucket_for(num, m, playoff_start_week)
            if bucket is Phase.REGULAR:
                _accumulate_points(regular[a], regular[b], m)
                if is_played(m):
                    _accumulate_result(regular[a], regular[b], m)
            else:
                _accumulate_points(postseason[a][bucket.value], postseason[b][bucket.value], m)

        if pos == checkpoint_pos:
            previous = _rank_map(_ordering(roster, regular))
            checkpoint_week = num

    final_rank = _rank_map(_ordering(roster, regular))
    prior_by_id = {r.team_id: r for r in prior_standings}

    rows: List[StandingRow] = []
    for t in teams:
        s = regular[t.id]
        gp = s["wins"] + s["losses"] + s["ties"]
        rank = final_rank[t.id]
        prev = previous.get(t.id, rank)
        prior = prior_by_id.get(t.id)
        if prior is not None:
            champion = prior.regular_season_champion
            playoff = prior.playoff.model_copy()
        else:
            champion = t.regular_season_champion
            playoff = t.playoff.model_copy()

        rows.append(
            StandingRow(
                team_id=t.id,
                display_name=t.display_name,
                owner_name=t.owner_name,
                state=t.state,
                wins=s["wins"],
                losses=s["losses"],
                ties=s["ties"],
                games_played=gp,
                points_for=s["points_for"],
                points_against=s["points_against"],
                point_diff=s["points_for"] - s["points_against"],
                win_pct=(s["wins"] + 0.5 * s["ties"]) / gp if gp > 0 else 0.0,
                rank=rank,
                previous_rank=prev,
                rank_change=prev - rank,
                phase_totals={
                    phase: PhaseTotals(**totals) for phase, totals in postseason[t.id].items()
                },
                regular_season_champion=champion,
                playoff=playoff,
            )
        )

    rows.sort(key=lambda r: r.rank)
    return StandingsResult(rows=rows, warnings=warnings, checkpoint_week=checkpoint_week)
