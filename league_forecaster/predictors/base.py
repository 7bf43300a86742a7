"""Base predictor interface for frame-level match predictions."""

from abc import ABC, abstractmethod
from typing import Tuple


class BasePredictor(ABC):
    """Abstract base class for all matchup models."""

    def __init__(self, name: str):
        """
        Initialize predictor.

        Args:
            name: Name of the predictor model
        """
        self.name = name

    @abstractmethod
    def frame_win_probability(self, home_strength: float, away_strength: float) -> float:
        """
        Probability that the home side wins a single frame.

        Args:
            home_strength: Home team strength
            away_strength: Away team strength

        Returns:
            Probability in (0, 1)
        """
        pass

    def predict(self, home_strength: float, away_strength: float) -> Tuple[str, float]:
        """
        Predict the favoured side of a single frame.

        Args:
            home_strength: Home team strength
            away_strength: Away team strength

        Returns:
            Tuple of ("home" or "away", win_probability)
        """
        p = self.frame_win_probability(home_strength, away_strength)
        if p >= 0.5:
            return "home", p
        return "away", 1.0 - p
