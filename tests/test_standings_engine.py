# tests/test_standings_engine.py
import pytest

from league_history.errors import SeasonValidationError
from league_history.logic.standings_engine import recompute
from league_history.models import BYE, Matchup, PlayoffRecord, StandingRow, Team, Week


def _teams(*ids):
    return [Team(id=i, display_name=i.title(), owner_name=f"owner-{i}") for i in ids]


def _week(*games, phase=None):
    return Week(
        matchups=[
            Matchup(team_a=a, score_a=sa, team_b=b, score_b=sb, phase=phase)
            for a, sa, b, sb in games
        ]
    )


def _rows(result):
    return {r.team_id: r for r in result.rows}


def test_single_scored_week_winner_ranks_first():
    res = recompute(_teams("a", "b"), {"1": _week(("a", 100, "b", 90))})
    rows = _rows(res)

    a, b = rows["a"], rows["b"]
    assert (a.wins, a.losses, a.ties) == (1, 0, 0)
    assert a.points_for == 100 and a.points_against == 90
    assert a.rank == 1
    assert (b.wins, b.losses) == (0, 1)
    assert b.rank == 2
    assert [r.team_id for r in res.rows] == ["a", "b"]


def test_unplayed_week_is_not_scored():
    res = recompute(_teams("a", "b"), {"1": _week(("a", None, "b", None))})
    rows = _rows(res)

    for tid in ("a", "b"):
        r = rows[tid]
        assert (r.wins, r.losses, r.ties) == (0, 0, 0)
        assert r.points_for == 0 and r.points_against == 0
        assert r.previous_rank == r.rank
    assert res.checkpoint_week is None
    # no data at all => roster order
    assert rows["a"].rank == 1 and rows["b"].rank == 2


def test_previous_rank_is_taken_before_last_regular_week():
    teams = _teams("a", "b", "c", "d")
    weeks = {
        "1": _week(("a", 100, "b", 90), ("c", 80, "d", 70)),
        "2": _week(("a", 100, "c", 110), ("b", 95, "d", 60)),
        "3": _week(("a", 120, "d", 50), ("b", 130, "c", 100)),
    }
    res = recompute(teams, weeks)
    rows = _rows(res)

    assert res.checkpoint_week == 2
    assert [r.team_id for r in res.rows] == ["a", "b", "c", "d"]

    # previous_rank must equal the ranking over weeks 1-2 only
    partial = _rows(recompute(teams, {"1": weeks["1"], "2": weeks["2"]}))
    for tid in ("a", "b", "c", "d"):
        assert rows[tid].previous_rank == partial[tid].rank

    assert rows["c"].previous_rank == 1 and rows["c"].rank == 3
    assert rows["c"].rank_change == -2
    assert rows["a"].rank_change == 1
    assert rows["d"].rank_change == 0


def test_equal_scores_are_a_tie():
    rows = _rows(recompute(_teams("a", "b"), {"1": _week(("a", 100, "b", 100))}))
    for tid in ("a", "b"):
        r = rows[tid]
        assert (r.wins, r.losses, r.ties) == (0, 0, 1)
        assert r.points_for == 100 and r.points_against == 100
        assert r.win_pct == 0.5


def test_zero_zero_counts_as_played_tie():
    rows = _rows(recompute(_teams("a", "b"), {"1": _week(("a", 0, "b", 0))}))
    assert rows["a"].ties == 1 and rows["b"].ties == 1
    assert rows["a"].games_played == 1


def test_recompute_is_idempotent():
    teams = _teams("a", "b", "c", "d")
    weeks = {
        "2": _week(("a", 101.25, "c", 99.5), ("b", 88.1, "d", 88.1)),
        "1": _week(("a", 70.4, "b", 80.6), ("c", None, "d", 90)),
        "15": _week(("a", 120, "b", 110), phase="playoff"),
    }
    first = recompute(teams, weeks)
    second = recompute(teams, weeks, prior_standings=first.rows)
    assert [r.model_dump() for r in first.rows] == [r.model_dump() for r in second.rows]
    assert first.warnings == second.warnings


def test_bye_never_accumulates():
    weeks = {
        "1": Week(
            matchups=[
                Matchup(team_a="a", score_a=120, team_b=BYE, score_b=0),
                Matchup(team_a="b", score_a=90, team_b="c", score_b=80),
            ]
        )
    }
    res = recompute(_teams("a", "b", "c"), weeks)
    a = _rows(res)["a"]
    assert (a.wins, a.losses, a.ties, a.games_played) == (0, 0, 0, 0)
    assert a.points_for == 0 and a.points_against == 0
    assert res.warnings == []


def test_bye_in_roster_is_still_neutral():
    # bypasses the Team id check, as a hand-edited data file would
    teams = _teams("a", "b") + [Team.model_construct(id=BYE)]
    weeks = {"1": _week(("a", 120, BYE, 0)), "2": _week(("a", 100, "b", 90))}
    rows = _rows(recompute(teams, weeks))

    assert (rows["a"].wins, rows["a"].points_for) == (1, 100)
    assert (rows[BYE].wins, rows[BYE].losses, rows[BYE].points_for) == (0, 0, 0)
    assert rows[BYE].points_against == 0


def test_unknown_team_is_skipped_with_warning():
    weeks = {"1": _week(("a", 100, "ghost", 90))}
    res = recompute(_teams("a", "b"), weeks)

    assert len(res.warnings) == 1
    assert "ghost" in res.warnings[0]
    a = _rows(res)["a"]
    assert a.wins == 0 and a.points_for == 0
    # only matchup references an unknown team => week not scored
    assert res.checkpoint_week is None


def test_one_sided_score_adds_points_but_no_result():
    weeks = {
        "1": _week(("a", 100, "b", None), ("c", 80, "d", 70)),
    }
    rows = _rows(recompute(_teams("a", "b", "c", "d"), weeks))

    assert rows["a"].points_for == 100
    assert rows["b"].points_against == 100
    assert rows["a"].games_played == 0 and rows["b"].games_played == 0
    assert rows["c"].wins == 1 and rows["d"].losses == 1


def test_postseason_points_go_to_phase_buckets_without_record():
    teams = _teams("a", "b", "c", "d")
    weeks = {
        "1": _week(("a", 100, "b", 90), ("c", 80, "d", 70)),
        "15": Week(
            matchups=[
                Matchup(team_a="a", score_a=130, team_b="c", score_b=120, phase="playoff"),
                Matchup(team_a="b", score_a=60, team_b="d", score_b=65, phase="toilet"),
            ]
        ),
        "16": _week(("a", 90, "b", 95)),
    }
    rows = _rows(recompute(teams, weeks, playoff_start_week=15))

    a = rows["a"]
    assert (a.wins, a.losses, a.ties) == (1, 0, 0)
    assert a.points_for == 100
    assert a.phase_totals["playoff"].points_for == 130
    assert a.phase_totals["playoff"].points_against == 120
    # unlabeled playoff-week game => dead rubber
    assert a.phase_totals["dead_rubber"].points_for == 90
    assert rows["b"].phase_totals["dead_rubber"].points_for == 95
    # legacy "toilet" label => consolation
    assert rows["d"].phase_totals["consolation"].points_for == 65
    assert rows["d"].losses == 1 and rows["d"].wins == 0


def test_playoff_weeks_do_not_move_the_checkpoint():
    teams = _teams("a", "b")
    weeks = {
        "1": _week(("a", 100, "b", 90)),
        "2": _week(("a", 80, "b", 95)),
        "15": _week(("a", 100, "b", 50), phase="playoff"),
    }
    res = recompute(teams, weeks, playoff_start_week=15)
    assert res.checkpoint_week == 1


def test_trailing_unplayed_week_does_not_trigger_checkpoint():
    teams = _teams("a", "b")
    weeks = {
        "1": _week(("a", 100, "b", 90)),
        "2": _week(("a", 80, "b", 95)),
        "3": _week(("a", None, "b", None)),
    }
    res = recompute(teams, weeks)
    assert res.checkpoint_week == 1


def test_single_regular_week_has_zero_delta():
    res = recompute(_teams("a", "b", "c", "d"), {"1": _week(("d", 100, "a", 90))})
    for r in res.rows:
        assert r.previous_rank == r.rank
        assert r.rank_change == 0


def test_weeks_out_of_order_and_non_numeric_keys():
    teams = _teams("a", "b")
    weeks = {
        "3": _week(("a", 100, "b", 90)),
        "notes": _week(("a", 0, "b", 500)),
        "1": _week(("a", 50, "b", 60)),
        "2": _week(("a", 70, "b", 60)),
    }
    res = recompute(teams, weeks)
    rows = _rows(res)
    assert rows["a"].wins == 2 and rows["b"].wins == 1
    assert rows["b"].points_for == 210
    assert res.checkpoint_week == 2


def test_tie_break_points_for_then_roster_order():
    teams = _teams("a", "b", "c", "d")
    weeks = {
        "1": _week(("a", 90, "b", 100), ("c", 110, "d", 80)),
    }
    res = recompute(teams, weeks)
    assert [r.team_id for r in res.rows] == ["c", "b", "a", "d"]

    # fully level records fall back to roster order
    level = recompute(teams, {"1": _week(("a", 100, "b", 100), ("c", 100, "d", 100))})
    assert [r.team_id for r in level.rows] == ["a", "b", "c", "d"]


def test_conservation_and_rank_density():
    teams = _teams("a", "b", "c", "d", "e", "f")
    weeks = {
        "1": _week(("a", 100, "b", 90), ("c", 80, "d", 80), ("e", 70, "f", None)),
        "2": Week(
            matchups=[
                Matchup(team_a="a", score_a=120, team_b=BYE),
                Matchup(team_a="b", score_a=99, team_b="c", score_b=101),
                Matchup(team_a=None, team_b="d"),
                Matchup(team_a="e", score_a=88, team_b="f", score_b=77),
            ]
        ),
        "3": _week(("a", 91, "f", 92), ("b", 100, "e", 100)),
        "15": _week(("a", 120, "c", 110), phase="playoff"),
    }
    res = recompute(teams, weeks, playoff_start_week=15)

    expected_games = {"a": 2, "b": 3, "c": 2, "d": 1, "e": 2, "f": 2}
    for r in res.rows:
        assert r.wins + r.losses + r.ties == expected_games[r.team_id]
        assert r.games_played == expected_games[r.team_id]

    assert sorted(r.rank for r in res.rows) == list(range(1, len(teams) + 1))
    assert sorted(r.previous_rank for r in res.rows) == list(range(1, len(teams) + 1))


def test_metadata_carried_from_prior_row():
    teams = [
        Team(id="a", regular_season_champion=False),
        Team(id="b", playoff=PlayoffRecord(made=True, rounds=1)),
    ]
    prior = [
        StandingRow(
            team_id="a",
            wins=99,
            regular_season_champion=True,
            playoff=PlayoffRecord(made=True, rounds=2, champion=True),
        )
    ]
    rows = _rows(recompute(teams, {"1": _week(("a", 100, "b", 90))}, prior_standings=prior))

    assert rows["a"].regular_season_champion is True
    assert rows["a"].playoff.champion is True
    # derived fields are never carried
    assert rows["a"].wins == 1
    # no prior row => roster defaults
    assert rows["b"].playoff.made is True and rows["b"].playoff.rounds == 1


def test_empty_weeks_gives_zeroed_table():
    res = recompute(_teams("x", "y", "z"), {})
    assert [r.rank for r in res.rows] == [1, 2, 3]
    assert [r.team_id for r in res.rows] == ["x", "y", "z"]
    assert all(r.points_for == 0 and r.win_pct == 0.0 for r in res.rows)


def test_bad_roster_is_rejected():
    with pytest.raises(SeasonValidationError):
        recompute([], {})
    with pytest.raises(SeasonValidationError):
        recompute(_teams("a", "a"), {})


def test_numeric_string_scores_are_coerced():
    m = Matchup(team_a="a", score_a="101.5", team_b="b", score_b="", phase="out")
    assert m.score_a == 101.5
    assert m.score_b is None
    assert m.phase == "dead_rubber"
