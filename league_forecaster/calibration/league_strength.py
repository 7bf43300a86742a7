"""
League strength calibration.

Each cross-league bridge player's rating in a league is first normalised by
that league's division offsets, so division effects are removed before
leagues are compared. The pairwise league differences are then solved with
the same damped, zero-centred iteration used for divisions.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models.league import LeagueSnapshot
from .bridge_players import BridgePlayer, StatContext
from .config import CalibrationConfig
from .division_strength import DivisionStrength, calculate_division_strengths
from .offsets import add_pair_observation, solve_offsets

logger = logging.getLogger(__name__)


@dataclass
class LeagueStrength:
    league_id: str
    offset: float
    confidence: float
    bridge_player_count: int
    division_strengths: List[DivisionStrength] = field(default_factory=list)

    def division(self, code: str) -> Optional[DivisionStrength]:
        for strength in self.division_strengths:
            if strength.division == code:
                return strength
        return None


def normalized_rating(
    contexts: List[StatContext],
    division_offsets: Dict[str, float],
    min_games: int = 3,
) -> Optional[float]:
    """Games-weighted (win pct + division offset) over contexts with enough games."""
    total_games = 0
    weighted = 0.0
    for ctx in contexts:
        if ctx.stats.played < min_games:
            continue
        weighted += (ctx.stats.pct + division_offsets.get(ctx.division, 0.0)) * ctx.stats.played
        total_games += ctx.stats.played
    return weighted / total_games if total_games else None


def calculate_league_strengths(
    leagues: Dict[str, LeagueSnapshot],
    bridge_players: List[BridgePlayer],
    config: Optional[CalibrationConfig] = None,
) -> List[LeagueStrength]:
    """
    Offsets for every league.

    Args:
        leagues: league id -> snapshot
        bridge_players: All bridge players, intra- and cross-league
        config: Calibration configuration

    Returns:
        One LeagueStrength per league, each carrying its division strengths
    """
    config = config or CalibrationConfig()
    if not leagues:
        return []

    division_strengths = {
        league_id: calculate_division_strengths(snapshot, bridge_players, config, league_id)
        for league_id, snapshot in leagues.items()
    }
    division_offsets = {
        league_id: {s.division: s.offset for s in strengths}
        for league_id, strengths in division_strengths.items()
    }

    pair_diffs: Dict = {}
    usable = 0
    for bridge in bridge_players:
        league_ids = [lid for lid in dict.fromkeys(c.league_id for c in bridge.contexts)]
        if len(league_ids) < 2:
            continue
        contributed = False
        for i, first in enumerate(league_ids):
            for second in league_ids[i + 1:]:
                first_rating = normalized_rating(
                    bridge.contexts_in(first), division_offsets.get(first, {}), config.min_context_games
                )
                second_rating = normalized_rating(
                    bridge.contexts_in(second), division_offsets.get(second, {}), config.min_context_games
                )
                if first_rating is None or second_rating is None:
                    continue
                diff = (first_rating - second_rating) * bridge.match_confidence
                add_pair_observation(pair_diffs, first, second, diff)
                contributed = True
        usable += contributed

    offsets = solve_offsets(list(leagues), pair_diffs, config.iterations, config.damping)
    confidence = config.confidence(usable)
    logger.debug("Solved %d league offsets from %d bridge players", len(offsets), usable)

    return [
        LeagueStrength(
            league_id=league_id,
            offset=offsets[league_id],
            confidence=confidence,
            bridge_player_count=usable,
            division_strengths=division_strengths[league_id],
        )
        for league_id in leagues
    ]
