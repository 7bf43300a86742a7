"""Cross-division and cross-league strength calibration."""

from .adjusted_ratings import (
    AdjustedRating,
    AdjustedRatingCalculator,
    CalibrationResult,
    calibrate,
    global_percentiles,
)
from .bridge_players import (
    BridgePlayer,
    find_all_bridge_players,
    find_cross_league_bridge_players,
    find_intra_league_bridge_players,
)
from .config import CalibrationConfig
from .division_strength import DivisionStrength, calculate_division_strengths
from .identity import PlayerIdentity
from .league_strength import LeagueStrength, calculate_league_strengths

__all__ = [
    "AdjustedRating",
    "AdjustedRatingCalculator",
    "BridgePlayer",
    "CalibrationConfig",
    "CalibrationResult",
    "DivisionStrength",
    "LeagueStrength",
    "PlayerIdentity",
    "calculate_division_strengths",
    "calculate_league_strengths",
    "calibrate",
    "find_all_bridge_players",
    "find_cross_league_bridge_players",
    "find_intra_league_bridge_players",
    "global_percentiles",
]
