"""
Division strength calibration within one league.

For every bridge player and every pair of divisions they played in (with
enough games in each), the win-rate difference between the two contexts is
recorded, weighted by match confidence. The averaged pairwise differences
are solved into zero-centred offsets.

Sign convention: a negative offset marks a division where players post
higher win rates than they do elsewhere, so adding the offset to a win rate
from that division pulls it down to a comparable level.

With few usable bridge players the measured offsets are blended with a
tier table keyed on conventional division names; below the confidence floor
the tier table is used alone.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import numpy as np

from ..models.league import LeagueSnapshot
from .bridge_players import BridgePlayer
from .config import CalibrationConfig, tier_multiplier
from .offsets import add_pair_observation, solve_offsets

logger = logging.getLogger(__name__)


@dataclass
class DivisionStrength:
    division: str
    league_id: str
    # Offset to use: measured, tier-based or a blend of the two
    offset: float
    # Offset measured from bridge players alone
    data_offset: float
    tier_offset: float
    confidence: float
    bridge_player_count: int
    sample_size: int


def tier_offsets(snapshot: LeagueSnapshot, config: CalibrationConfig) -> Dict[str, float]:
    """Zero-centred fallback offsets from the tier table."""
    raw = {
        code: (tier_multiplier(code, division.name, config) - 1.0) * config.tier_offset_scale
        for code, division in snapshot.divisions.items()
    }
    if not raw:
        return {}
    mean = float(np.mean(list(raw.values())))
    return {code: value - mean for code, value in raw.items()}


def calculate_division_strengths(
    snapshot: LeagueSnapshot,
    bridge_players: List[BridgePlayer],
    config: Optional[CalibrationConfig] = None,
    league_id: Optional[str] = None,
) -> List[DivisionStrength]:
    """
    Offsets for every division of a league.

    Args:
        snapshot: The league's data; its divisions define the solve set
        bridge_players: Detected bridge players (any league)
        config: Calibration configuration
        league_id: Overrides ``snapshot.league_id``

    Returns:
        One DivisionStrength per division; empty when the league has none
    """
    config = config or CalibrationConfig()
    league_id = snapshot.league_id if league_id is None else league_id
    codes = list(snapshot.divisions)
    if not codes:
        return []

    pair_diffs: Dict = {}
    usable = 0
    samples = 0
    # A person found both as an intra-league and a cross-league bridge
    # contributes their contexts in this league once
    seen: Set[str] = set()
    for bridge in bridge_players:
        contexts = [c for c in bridge.contexts_in(league_id) if (c.player or bridge.name) not in seen]
        if len({c.division for c in contexts}) < 2:
            continue
        seen.update(c.player or bridge.name for c in contexts)
        contributed = False
        for i, a in enumerate(contexts):
            for b in contexts[i + 1:]:
                if a.division == b.division or a.division not in codes or b.division not in codes:
                    continue
                if a.stats.played < config.min_context_games or b.stats.played < config.min_context_games:
                    continue
                diff = (a.stats.pct - b.stats.pct) * bridge.match_confidence
                add_pair_observation(pair_diffs, a.division, b.division, diff)
                samples += a.stats.played + b.stats.played
                contributed = True
        usable += contributed

    measured = solve_offsets(codes, pair_diffs, config.iterations, config.damping)
    fallback = tier_offsets(snapshot, config)
    confidence = config.confidence(usable)

    if confidence < config.fallback_confidence_floor:
        logger.info(
            "League %s has %d usable bridge players, using division tiers", league_id, usable
        )

    strengths = []
    for code in codes:
        data_offset = measured[code]
        tier = fallback[code]
        if confidence < config.fallback_confidence_floor:
            offset = tier
        elif confidence < 1.0:
            offset = confidence * data_offset + (1 - confidence) * tier
        else:
            offset = data_offset
        strengths.append(DivisionStrength(
            division=code,
            league_id=league_id,
            offset=offset,
            data_offset=data_offset,
            tier_offset=tier,
            confidence=confidence,
            bridge_player_count=usable,
            sample_size=samples,
        ))
    return strengths
