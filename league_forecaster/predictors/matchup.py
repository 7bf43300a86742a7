"""Logistic frame-level matchup model."""

from scipy.special import expit

from .base import BasePredictor

# Home advantage on the strength scale
HOME_ADVANTAGE = 0.2


def frame_win_probability(
    home_strength: float,
    away_strength: float,
    home_advantage: float = HOME_ADVANTAGE,
) -> float:
    """
    Probability that the home player wins a frame.

    Equal strengths always give ``expit(home_advantage)``; large gaps
    saturate toward 0 or 1, which bounds simulated blowouts.
    """
    return float(expit((home_strength - away_strength) + home_advantage))


class MatchupModel(BasePredictor):
    """Predictor mapping two strength scalars to a frame win probability."""

    def __init__(self, home_advantage: float = HOME_ADVANTAGE):
        """
        Initialize matchup model.

        Args:
            home_advantage: Strength units added to the home side
        """
        super().__init__("logistic")
        self.home_advantage = home_advantage

    def frame_win_probability(self, home_strength: float, away_strength: float) -> float:
        return frame_win_probability(home_strength, away_strength, self.home_advantage)
