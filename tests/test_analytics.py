"""Tests for form, head-to-head, splits, scouting and power rankings."""

import pytest

from league_forecaster.analytics.form import form_pct, player_form, player_games
from league_forecaster.analytics.head_to_head import (
    analyze_head_to_head,
    head_to_head,
    player_frame_history,
    squad_head_to_head,
)
from league_forecaster.analytics.rankings import all_schedule_strength, power_rankings, schedule_strength
from league_forecaster.analytics.scouting import appearance_rates, predict_lineup, scouting_report, team_form
from league_forecaster.analytics.splits import (
    BreakAndDishStats,
    break_and_dish_stats,
    compare_break_and_dish,
    player_home_away,
    set_performance,
    team_home_away,
)
from league_forecaster.models.league import Division, LeagueSnapshot
from league_forecaster.models.match import Fixture, FrameOutcome, MatchFrames, MatchResult
from league_forecaster.models.player import PlayerSeason, PlayerTeamStats


def _build_match(match_id, date, home, away, pairs, break_and_dish=()):
    frames = [
        FrameOutcome(i + 1, h, a, winner, break_and_dish=(i + 1) in break_and_dish)
        for i, (h, a, winner) in enumerate(pairs)
    ]
    return MatchFrames(match_id, date, home, away, "D1", frames)


def _player_matches(results):
    """One match per result for Ann (home) against Zed, oldest first."""
    return [
        _build_match(f"m{i}", f"{i + 1:02d}-10-2025", "Anchor", "Bridge", [("Ann", "Zed", w)])
        for i, w in enumerate(results)
    ]


def test_player_games_most_recent_first():
    games = player_games("Ann", _player_matches(["home", "away"]))
    assert [g.date for g in games] == ["02-10-2025", "01-10-2025"]
    assert [g.won for g in games] == [False, True]
    assert games[0].opponent == "Zed"


def test_player_form_hot_streak():
    frames = _player_matches(["away", "away", "home", "home", "home", "home", "home"])
    form = player_form("Ann", frames)
    assert form.last5.played == 5
    assert form.last5.pct == 100.0
    assert form.trend == "hot"
    assert form.streak.kind == "win"
    assert form.streak.count == 5
    assert form.momentum == pytest.approx(1.0)
    assert form.season_pct == pytest.approx(500 / 7)


def test_player_form_cold_and_steady():
    cold = player_form("Ann", _player_matches(["away"] * 4 + ["home"]))
    assert cold.trend == "cold"
    assert cold.streak.kind == "win"
    assert cold.streak.count == 1

    short = player_form("Ann", _player_matches(["away"] * 3))
    assert short.trend == "steady"


def test_player_form_unknown_player():
    assert player_form("Nobody", _player_matches(["home"])) is None


def test_form_pct_prefers_medium_window():
    frames = _player_matches(["home"] * 6 + ["away"] * 2)
    form = player_form("Ann", frames)
    assert form.last8.played == 8
    assert form_pct(form) == pytest.approx(75.0)

    few = player_form("Ann", _player_matches(["home", "away", "away"]))
    assert form_pct(few) == few.last5.pct


def test_head_to_head_counts_both_venues():
    frames = [
        _build_match("m1", "01-10-2025", "Anchor", "Bridge", [("Ann", "Zed", "home"), ("Bob", "Zed", "away")]),
        _build_match("m2", "08-10-2025", "Bridge", "Anchor", [("Zed", "Ann", "home")]),
        _build_match("m3", "15-10-2025", "Bridge", "Anchor", [("Zed", "Ann", "away")]),
    ]
    record = head_to_head("Ann", "Zed", frames)
    assert (record.wins, record.losses, record.played, record.net) == (2, 1, 3, 1)
    assert record.details[0] == ("15-10-2025", "Ann")
    assert record.details[1] == ("08-10-2025", "Zed")


def test_analyze_head_to_head_labels():
    frames = _player_matches(["home", "home", "home", "away"])
    analysis = analyze_head_to_head("Ann", "Zed", frames)
    assert analysis.advantage == "strong"
    assert analysis.confidence == pytest.approx(0.4)
    assert analysis.recent_form[0] == ("04-10-2025", False)

    reverse = analyze_head_to_head("Zed", "Ann", frames)
    assert reverse.advantage == "disadvantage"
    assert analyze_head_to_head("Ann", "Nobody", frames) is None


def test_squad_head_to_head_uses_frames_and_rosters():
    frames = [
        _build_match("m1", "01-10-2025", "Anchor", "Bridge", [("Ann", "Zed", "home"), ("Ann", "Yan", "home")]),
        _build_match("m2", "08-10-2025", "Cue Club", "Bridge", [("Cal", "Zed", "home")]),
        _build_match("m3", "15-10-2025", "Cue Club", "Anchor", [("Cal", "Ann", "home"), ("Cal", "Ann", "home")]),
    ]
    records = squad_head_to_head("Anchor", "Cue Club", frames, {"D1:Cue Club": ["Cal", "Dee"]})
    assert len(records) == 1
    assert (records[0].player_a, records[0].player_b, records[0].played) == ("Ann", "Cal", 2)


def test_player_frame_history_flags_break_and_dish():
    frames = [_build_match("m1", "01-10-2025", "Anchor", "Bridge", [("Ann", "Zed", "home")], break_and_dish=(1,))]
    history = player_frame_history("Ann", frames)
    assert len(history) == 1
    assert history[0].break_and_dish
    assert history[0].won


def test_player_home_away_split():
    frames = [
        _build_match("m1", "01-10-2025", "Anchor", "Bridge", [("Ann", "Zed", "home"), ("Ann", "Yan", "away")]),
        _build_match("m2", "08-10-2025", "Bridge", "Anchor", [("Zed", "Ann", "away")]),
    ]
    split = player_home_away("Ann", frames)
    assert (split.home.played, split.home.won) == (2, 1)
    assert (split.away.played, split.away.won) == (1, 1)
    assert split.home.pct == 50.0


def test_team_home_away_split():
    results = [
        MatchResult("01-10-2025", "Anchor", "Bridge", 6, 4, "D1"),
        MatchResult("08-10-2025", "Bridge", "Anchor", 5, 5, "D1"),
        MatchResult("15-10-2025", "Cue Club", "Anchor", 7, 3, "D1"),
    ]
    split = team_home_away("Anchor", results)
    assert (split.home.played, split.home.won, split.home.win_pct) == (1, 1, 100.0)
    assert (split.away.played, split.away.drawn, split.away.lost) == (2, 1, 1)
    assert split.away.frames_for == 8


def test_set_performance_bias():
    pairs = [("Ann", "Zed", "home")] * 5 + [("Ann", "Zed", "away")] * 5
    frames = [_build_match("m1", "01-10-2025", "Anchor", "Bridge", pairs)]
    perf = set_performance("Anchor", frames)
    assert perf.set1.pct == 100.0
    assert perf.set2.pct == 0.0
    assert perf.bias == 100.0
    assert set_performance("Bridge", frames).bias == -100.0
    assert set_performance("Cue Club", frames) is None


def test_break_and_dish_aggregates():
    players = {
        "Ann": PlayerSeason([
            PlayerTeamStats("Anchor", "D1", 10, 6, 60.0, bd_for=4, bd_against=1, forfeits=1),
            PlayerTeamStats("Cup Side", "CUP", 2, 1, 50.0, bd_for=1, cup=True),
        ]),
        "Bob": PlayerSeason([PlayerTeamStats("Anchor", "D1", 10, 5, 50.0, bd_for=0, bd_against=3)]),
    }
    ann = break_and_dish_stats(players, player="Ann")
    assert (ann.games, ann.bd_for) == (12, 5)

    team = break_and_dish_stats(players, team="Anchor", division="D1")
    assert (team.games, team.bd_for, team.bd_against, team.forfeits) == (20, 4, 4, 1)
    assert team.efficiency == 0.5
    assert team.forfeit_rate == pytest.approx(0.05)

    assert BreakAndDishStats().efficiency == 0.5
    comparison = compare_break_and_dish(ann, team)
    assert comparison["net_diff"] == (5 - 1) - 0


def _build_snapshot():
    results = [
        MatchResult("01-10-2025", "Anchor", "Bridge", 8, 2, "D1"),
        MatchResult("08-10-2025", "Cue Club", "Anchor", 3, 7, "D1"),
        MatchResult("15-10-2025", "Bridge", "Cue Club", 5, 5, "D1"),
    ]
    frames = [
        _build_match("m1", "01-10-2025", "Anchor", "Bridge", [("Ann", "Zed", "home"), ("Bob", "Yan", "home")]),
        _build_match("m2", "08-10-2025", "Cue Club", "Anchor", [("Cal", "Ann", "away"), ("Dee", "Cat", "home")]),
        _build_match("m3", "15-10-2025", "Bridge", "Cue Club", [("Zed", "Cal", "home")]),
        _build_match("m4", "22-10-2025", "Bridge", "Anchor", [("Zed", "Ann", "home")]),
    ]
    return LeagueSnapshot(
        divisions={"D1": Division("D1", "Division 1", ["Anchor", "Bridge", "Cue Club"])},
        results=results,
        fixtures=[
            Fixture("29-10-2025", "Anchor", "Cue Club", "D1"),
            Fixture("05-11-2025", "Bridge", "Anchor", "D1"),
        ],
        frames=frames,
        rosters={"D1:Anchor": ["Ann", "Bob", "Cat"]},
        players={
            "Ann": PlayerSeason([PlayerTeamStats("Anchor", "D1", 10, 8, 80.0, bd_for=3)]),
            "Bob": PlayerSeason([PlayerTeamStats("Anchor", "D1", 8, 2, 25.0, forfeits=2)]),
            "Cat": PlayerSeason([PlayerTeamStats("Anchor", "D1", 4, 2, 50.0)]),
        },
    )


def test_appearance_rates_categories():
    rates = {a.name: a for a in appearance_rates("Anchor", _build_snapshot().frames)}
    assert rates["Ann"].rate == 1.0
    assert rates["Ann"].category == "core"
    assert rates["Ann"].total_matches == 3
    assert rates["Bob"].category == "fringe"


def test_predict_lineup_recent_players():
    lineup = predict_lineup("Anchor", _build_snapshot().frames, recent_n=2)
    assert lineup.recent_players == ["Ann", "Cat"]
    assert lineup.players[0].name == "Ann"


def test_team_form_newest_first():
    assert team_form("Anchor", _build_snapshot().results) == ["W", "W"]
    assert team_form("Bridge", _build_snapshot().results) == ["D", "L"]


def test_scouting_report():
    report = scouting_report(_build_snapshot(), "Anchor")
    assert report.team_form == ["W", "W"]
    assert report.home_away.home.won == 1
    assert report.set_performance is not None
    assert report.break_and_dish.bd_for == 3
    assert [p.name for p in report.strongest_players] == ["Ann", "Cat", "Bob"]
    assert report.weakest_players[0].name == "Bob"
    assert report.forfeit_rate == pytest.approx(2 / 22)


def test_power_rankings_order_and_components():
    rankings = power_rankings(_build_snapshot(), "D1")
    assert [r.rank for r in rankings] == [1, 2, 3]
    assert rankings[0].team == "Anchor"
    assert set(rankings[0].components) == {"points", "form", "mov", "sos", "trajectory"}
    assert rankings[0].components["points"] == 1.0
    for ranking in rankings:
        assert 0.0 <= ranking.score <= 1.0
    scores = [r.score for r in rankings]
    assert scores == sorted(scores, reverse=True)


def test_power_rankings_carry_previous_rank():
    snapshot = _build_snapshot()
    first = power_rankings(snapshot, "D1")
    second = power_rankings(snapshot, "D1", previous=first)
    assert all(r.previous_rank == r.rank for r in second)
    assert power_rankings(snapshot, "D9") == []


def test_schedule_strength():
    snapshot = _build_snapshot()
    strengths = {"Anchor": 0.5, "Bridge": -0.5, "Cue Club": 0.25}
    sos = schedule_strength(snapshot, "Anchor", "D1", strengths)
    assert sos.completed == pytest.approx((-0.5 + 0.25) / 2)
    assert sos.remaining == pytest.approx((0.25 - 0.5) / 2)
    assert sos.combined == pytest.approx((-0.5 + 0.25 + 0.25 - 0.5) / 4)

    ranked = all_schedule_strength(snapshot, "D1")
    assert [e.rank for e in ranked] == [1, 2, 3]
