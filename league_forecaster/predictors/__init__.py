"""Team strength estimation and frame-level matchup probabilities."""

from .matchup import HOME_ADVANTAGE, MatchupModel, frame_win_probability
from .strength import StrengthConfig, StrengthEstimator, bayesian_pct

__all__ = [
    "HOME_ADVANTAGE",
    "MatchupModel",
    "StrengthConfig",
    "StrengthEstimator",
    "bayesian_pct",
    "frame_win_probability",
]
