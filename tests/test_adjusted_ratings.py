"""Tests for cross-context adjusted ratings."""

import numpy as np
import pytest

from league_forecaster.calibration.adjusted_ratings import (
    AdjustedRating,
    AdjustedRatingCalculator,
    calibrate,
    global_percentiles,
)
from league_forecaster.calibration.config import CalibrationConfig
from league_forecaster.calibration.division_strength import DivisionStrength
from league_forecaster.calibration.league_strength import LeagueStrength
from league_forecaster.models.league import Division, LeagueSnapshot
from league_forecaster.models.player import PlayerSeason, PlayerTeamStats
from league_forecaster.predictors.strength import bayesian_pct


def _stats(team, division, played, won):
    return PlayerTeamStats(team, division, played, won, won / played * 100)


def _build_leagues():
    l1 = LeagueSnapshot(
        divisions={
            "D1": Division("D1", "Division 1", ["Alpha", "Beta"]),
            "D2": Division("D2", "Division 2", ["Gamma"]),
        },
        players={
            "Ida Intra": PlayerSeason([_stats("Alpha", "D1", 10, 7), _stats("Gamma", "D2", 10, 5)]),
            "Sam Smith": PlayerSeason([_stats("Alpha", "D1", 10, 6)]),
            "Jo Brown": PlayerSeason([_stats("Beta", "D1", 10, 4)]),
            "Short Stint": PlayerSeason([_stats("Beta", "D1", 2, 1), _stats("Gamma", "D2", 2, 2)]),
        },
        league_id="L1",
    )
    l2 = LeagueSnapshot(
        divisions={"D1": Division("D1", "Premier", ["Delta"])},
        players={
            "sam  smith": PlayerSeason([_stats("Delta", "D1", 10, 4)]),
            "Jo Browne": PlayerSeason([_stats("Delta", "D1", 10, 5)]),
        },
        league_id="L2",
    )
    return {"L1": l1, "L2": l2}


def _build_calculator(division_offset=-4.0, league_offset=2.0, division_confidence=0.5, league_confidence=1.0):
    strengths = [
        LeagueStrength(
            league_id="L1",
            offset=league_offset,
            confidence=league_confidence,
            bridge_player_count=3,
            division_strengths=[
                DivisionStrength("D1", "L1", division_offset, division_offset, 0.0, division_confidence, 1, 20),
                DivisionStrength("D2", "L1", -division_offset, -division_offset, 0.0, division_confidence, 1, 20),
            ],
        ),
    ]
    return AdjustedRatingCalculator(_build_leagues(), strengths)


def test_player_rating_applies_both_offsets():
    rating = _build_calculator().player_rating("Sam Smith", "L1", "D1")
    assert rating.raw_pct == pytest.approx(60.0)
    assert rating.bayesian_pct == pytest.approx(56.25)
    assert rating.division_offset == -4.0
    assert rating.league_offset == 2.0
    assert rating.total_adjustment == -2.0
    assert rating.adjusted_pct == pytest.approx(54.25)
    assert rating.global_percentile is None


def test_confidence_is_weakest_calibration_input():
    assert _build_calculator().player_rating("Sam Smith", "L1", "D1").confidence == 0.5
    low_league = _build_calculator(league_confidence=0.2)
    assert low_league.player_rating("Sam Smith", "L1", "D1").confidence == 0.2


def test_z_score_and_percentiles_within_division():
    rating = _build_calculator().player_rating("Sam Smith", "L1", "D1")
    # Short Stint's two-game context is left out of the pool
    pool = [bayesian_pct(7, 10), bayesian_pct(6, 10), bayesian_pct(4, 10)]
    assert rating.z_score == pytest.approx((56.25 - np.mean(pool)) / np.std(pool))
    assert rating.division_percentile == pytest.approx(100 / 3)
    # Season totals: Ida 12/20, Sam 6/10, Jo 4/10, Short Stint 3/4
    assert rating.league_percentile == pytest.approx(25.0)


def test_player_rating_missing_context():
    calculator = _build_calculator()
    assert calculator.player_rating("Jo Brown", "L1", "D2") is None
    assert calculator.player_rating("Nobody", "L1", "D1") is None
    assert calculator.player_rating("Sam Smith", "L9", "D1") is None


def test_player_without_strengths_has_zero_confidence():
    calculator = AdjustedRatingCalculator(_build_leagues(), [])
    rating = calculator.player_rating("sam  smith", "L2", "D1")
    assert rating.adjusted_pct == rating.bayesian_pct
    assert rating.confidence == 0.0
    # Two-player pool: 43.75 and 50.0, population spread 3.125
    assert rating.z_score == pytest.approx(-1.0)


def test_single_value_pool_uses_unit_spread():
    leagues = {
        "L1": LeagueSnapshot(
            divisions={"D1": Division("D1", "Division 1", ["Alpha"])},
            players={"Solo": PlayerSeason([_stats("Alpha", "D1", 10, 6)])},
            league_id="L1",
        )
    }
    rating = AdjustedRatingCalculator(leagues, []).player_rating("Solo", "L1", "D1")
    assert rating.z_score == 0.0
    assert rating.division_percentile == 0.0


def test_team_rating_pools_player_records():
    rating = _build_calculator().team_rating("Alpha", "L1")
    assert rating.division == "D1"
    assert rating.raw_pct == pytest.approx(65.0)
    assert rating.bayesian_pct == pytest.approx(bayesian_pct(13, 20))
    assert rating.division_percentile == 50.0
    assert rating.adjusted_pct == pytest.approx(rating.bayesian_pct - 2.0)


def test_team_rating_unknown_team():
    calculator = _build_calculator()
    assert calculator.team_rating("Nowhere", "L1") is None
    assert calculator.team_rating("Alpha", "L9") is None


def _rating(name, adjusted):
    return AdjustedRating(name, "L1", "D1", adjusted, adjusted, adjusted, 0.0, 50.0, 50.0, 1.0, 0.0, 0.0)


def test_global_percentiles_rank_by_adjusted_pct():
    ratings = {"a": _rating("a", 61.0), "b": _rating("b", 40.0), "c": _rating("c", 55.0)}
    percentiles = global_percentiles(ratings)
    assert percentiles["b"] == pytest.approx(100 / 3)
    assert percentiles["c"] == pytest.approx(200 / 3)
    assert percentiles["a"] == 100.0
    assert ratings["a"].global_percentile == 100.0


def test_global_percentiles_empty():
    assert global_percentiles({}) == {}


def test_calibrate_end_to_end():
    result = calibrate(_build_leagues(), config=CalibrationConfig(full_confidence_bridge_count=2))
    names = sorted(b.name for b in result.bridge_players)
    assert names == ["Ida Intra", "Jo Brown", "Sam Smith", "Short Stint"]
    assert {s.league_id for s in result.league_strengths} == {"L1", "L2"}
    assert sum(s.offset for s in result.league_strengths) == pytest.approx(0.0, abs=1e-9)

    l1 = next(s for s in result.league_strengths if s.league_id == "L1")
    assert l1.confidence == 1.0
    assert l1.division("D1").confidence == 0.5
    assert l1.division("D1").offset < 0

    rating = result.calculator.player_rating("Sam Smith", "L1", "D1")
    assert rating.confidence == 0.5
    assert rating.adjusted_pct == pytest.approx(rating.bayesian_pct + rating.total_adjustment)


def test_pool_minimum_follows_config():
    config = CalibrationConfig(min_context_games=11)
    rating = AdjustedRatingCalculator(_build_leagues(), [], config).player_rating("Sam Smith", "L1", "D1")
    # No ten-game context qualifies, so the division pool is empty
    assert rating.division_percentile == 50.0
    assert rating.z_score == pytest.approx(56.25 - 50.0)
    # Only Ida's twenty-game season total remains, and it rates higher
    assert rating.league_percentile == 0.0
