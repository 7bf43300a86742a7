"""Monte Carlo season and match simulation."""

from .monte_carlo import (
    MatchPrediction,
    SeasonSimulator,
    SimulationConfig,
    TeamProjection,
    fixture_importance,
    run_season_simulation,
)

__all__ = [
    "MatchPrediction",
    "SeasonSimulator",
    "SimulationConfig",
    "TeamProjection",
    "fixture_importance",
    "run_season_simulation",
]
