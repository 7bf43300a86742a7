"""Tests for fixture lookups and squad strength."""

import pytest

from league_forecaster.data.fixtures import latest_result_date, remaining_fixtures, team_results
from league_forecaster.data.player_stats import (
    SQUAD_STRENGTH_SCALING,
    TeamPlayer,
    effective_pct,
    modified_squad_strength,
    squad_strength,
    strength_adjustments,
    team_players,
    top_players,
)
from league_forecaster.models.league import Division, LeagueSnapshot, SquadOverride
from league_forecaster.models.match import Fixture, MatchResult
from league_forecaster.models.player import PlayerSeason, PlayerTeamStats, PriorPlayerStats
from league_forecaster.predictors.strength import bayesian_pct


def _stats(team, played, won, division="D1"):
    return PlayerTeamStats(team=team, division=division, played=played, won=won, pct=won / played * 100)


def _build_snapshot():
    return LeagueSnapshot(
        divisions={
            "D1": Division("D1", "Division 1", ["Anchor", "Bridge"]),
            "D2": Division("D2", "Division 2", ["Cue Club"]),
        },
        results=[
            MatchResult("03-10-2025", "Anchor", "Bridge", 6, 4, "D1"),
            MatchResult("10-10-2025", "Bridge", "Anchor", 5, 5, "D1"),
        ],
        fixtures=[
            Fixture("03-10-2025", "Anchor", "Bridge", "D1"),
            Fixture("10-10-2025", "Bridge", "Anchor", "D1"),
            Fixture("17-10-2025", "Anchor", "Bridge", "D1"),
            Fixture("01-09-2025", "Cue Club", "Cue Club", "D2"),
        ],
        rosters={
            "D1:Anchor": ["Ann", "Bob", "Cat"],
            "D1:Bridge": ["Dan"],
        },
        players={
            "Ann": PlayerSeason([_stats("Anchor", 10, 8)]),
            "Bob": PlayerSeason([_stats("Anchor", 10, 4)]),
            "Eve": PlayerSeason([_stats("Anchor", 4, 2)]),
            "Dan": PlayerSeason([_stats("Bridge", 12, 6)]),
            "Fay": PlayerSeason([_stats("Bridge", 2, 2), _stats("Cue Club", 9, 9, "D2")]),
        },
        prior_players={
            "Cat": PriorPlayerStats(rating=0.5, win_pct=0.6, played=20),
        },
    )


def test_latest_result_date():
    snapshot = _build_snapshot()
    latest = latest_result_date(snapshot.results)
    assert (latest.day, latest.month) == (10, 10)
    assert latest_result_date([]) is None


def test_remaining_fixtures_strictly_after_latest_result():
    snapshot = _build_snapshot()
    remaining = remaining_fixtures(snapshot, "D1")
    assert [f.date for f in remaining] == ["17-10-2025"]


def test_remaining_fixtures_without_results_keeps_everything():
    snapshot = _build_snapshot()
    assert len(remaining_fixtures(snapshot, "D2")) == 1


def test_team_results_newest_first():
    snapshot = _build_snapshot()
    results = team_results("Anchor", snapshot.results)
    assert [r.date for r in results] == ["10-10-2025", "03-10-2025"]
    assert results[0].opponent == "Bridge"
    assert not results[0].is_home
    assert results[0].outcome == "D"
    assert results[1].outcome == "W"
    assert results[1].team_score == 6


def test_effective_pct_prefers_current_season():
    player = TeamPlayer("Ann", current=_stats("Anchor", 10, 8))
    eff = effective_pct(player)
    assert eff.pct == pytest.approx(0.8)
    assert eff.adj_pct == pytest.approx(bayesian_pct(8, 10) / 100)
    assert eff.weight == 10


def test_effective_pct_falls_back_to_prior():
    player = TeamPlayer("Cat", prior_win_pct=0.6, prior_played=20, current=_stats("Anchor", 2, 2))
    eff = effective_pct(player)
    assert eff.pct == pytest.approx(0.6)
    assert eff.wins == 12
    assert eff.weight == 20


def test_effective_pct_without_data():
    assert effective_pct(TeamPlayer("Nobody")) is None


def test_team_players_merges_roster_and_current_season():
    players = team_players(_build_snapshot(), "Anchor")
    names = [p.name for p in players]
    assert set(names) == {"Ann", "Bob", "Cat", "Eve"}
    assert names[0] == "Ann"
    eve = next(p for p in players if p.name == "Eve")
    assert not eve.rostered


def test_team_players_without_roster_or_division():
    snapshot = _build_snapshot()
    assert team_players(snapshot, "Cue Club") == []
    assert team_players(snapshot, "Nowhere") == []


def test_top_players_skips_players_without_data():
    players = [TeamPlayer("Nobody"), TeamPlayer("Bob", current=_stats("Anchor", 10, 4))]
    assert [p.name for p in top_players(players, 5)] == ["Bob"]


def test_squad_strength_is_games_weighted():
    snapshot = _build_snapshot()
    expected = (
        bayesian_pct(8, 10) / 100 * 10
        + bayesian_pct(4, 10) / 100 * 10
        + bayesian_pct(12, 20) / 100 * 20
        + bayesian_pct(2, 4) / 100 * 4
    ) / 44
    assert squad_strength(snapshot, "Anchor") == pytest.approx(expected)


def test_removing_best_player_weakens_squad():
    snapshot = _build_snapshot()
    overrides = {"Anchor": SquadOverride(removed=["Ann"])}
    assert modified_squad_strength(snapshot, "Anchor", overrides) < squad_strength(snapshot, "Anchor")

    adjustments = strength_adjustments(snapshot, "D1", overrides)
    assert set(adjustments) == {"Anchor"}
    assert adjustments["Anchor"] < 0


def test_adding_player_uses_busiest_context():
    snapshot = _build_snapshot()
    overrides = {"Bridge": SquadOverride(added=["Fay"])}
    original = squad_strength(snapshot, "Bridge")
    modified = modified_squad_strength(snapshot, "Bridge", overrides)
    assert modified > original
    adjustment = strength_adjustments(snapshot, "D1", overrides)["Bridge"]
    assert adjustment == pytest.approx((modified - original) * SQUAD_STRENGTH_SCALING)
