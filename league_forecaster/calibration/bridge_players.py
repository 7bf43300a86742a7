"""
Bridge player detection.

A bridge player has statistics in more than one division of a league, or in
more than one league. The paired contexts are the only evidence available
for comparing divisions or leagues that never play each other.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..models.league import LeagueSnapshot
from ..models.player import PlayerTeamStats
from .config import CalibrationConfig
from .identity import PlayerIdentity, name_similarity, normalize_player_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatContext:
    """One (league, division, team) statistical context of a player."""

    league_id: str
    division: str
    stats: PlayerTeamStats
    # Player name as recorded in that league
    player: str = ""


@dataclass
class BridgePlayer:
    name: str
    canonical_name: str
    contexts: List[StatContext] = field(default_factory=list)
    # 1.0 for exact matches, name similarity for fuzzy ones
    match_confidence: float = 1.0

    @property
    def leagues(self) -> Set[str]:
        return {c.league_id for c in self.contexts}

    def contexts_in(self, league_id: str) -> List[StatContext]:
        return [c for c in self.contexts if c.league_id == league_id]

    def divisions_in(self, league_id: str) -> Set[str]:
        return {c.division for c in self.contexts_in(league_id)}


@dataclass
class _LeaguePlayer:
    name: str
    normalized: str
    league_id: str
    stats: List[PlayerTeamStats]

    @property
    def key(self) -> Tuple[str, str]:
        return self.league_id, self.name

    def contexts(self) -> List[StatContext]:
        return [StatContext(self.league_id, s.division, s, self.name) for s in self.stats]


def find_intra_league_bridge_players(snapshot: LeagueSnapshot, league_id: Optional[str] = None) -> List[BridgePlayer]:
    """
    Players with non-cup statistics in at least two divisions of one league.

    Args:
        snapshot: One league's data
        league_id: Overrides ``snapshot.league_id``
    """
    league_id = snapshot.league_id if league_id is None else league_id
    bridges = []
    for name, season in snapshot.players.items():
        stats = season.league_teams
        if len({s.division for s in stats}) < 2:
            continue
        bridges.append(BridgePlayer(
            name=name,
            canonical_name=normalize_player_name(name),
            contexts=[StatContext(league_id, s.division, s, name) for s in stats],
            match_confidence=1.0,
        ))
    return bridges


def _league_players(leagues: Dict[str, LeagueSnapshot]) -> List[_LeaguePlayer]:
    players = []
    for league_id, snapshot in leagues.items():
        for name, season in snapshot.players.items():
            stats = season.league_teams
            if stats:
                players.append(_LeaguePlayer(name, normalize_player_name(name), league_id, stats))
    return players


def _bridge_from_group(group: List[_LeaguePlayer], confidence: float, canonical: str) -> BridgePlayer:
    contexts = []
    for player in group:
        contexts.extend(player.contexts())
    return BridgePlayer(
        name=group[0].name,
        canonical_name=canonical,
        contexts=contexts,
        match_confidence=confidence,
    )


def find_cross_league_bridge_players(
    leagues: Dict[str, LeagueSnapshot],
    identities: Optional[Dict[str, Dict[str, PlayerIdentity]]] = None,
    config: Optional[CalibrationConfig] = None,
) -> List[BridgePlayer]:
    """
    Players appearing in more than one league.

    Matching runs in three passes, each only over players not yet matched:

    1. Pre-computed identities (league id -> raw name -> identity), when
       supplied. A group's confidence is its weakest link; groups below the
       similarity threshold are discarded.
    2. Exact match on the normalized name (confidence 1.0).
    3. Fuzzy match between league pairs at or above the threshold
       (confidence = similarity).

    Args:
        leagues: league id -> snapshot
        identities: Optional identity mapping
        config: Calibration configuration

    Returns:
        Bridge players spanning at least two leagues
    """
    config = config or CalibrationConfig()
    if len(leagues) < 2:
        return []

    players = _league_players(leagues)
    matched: Set[Tuple[str, str]] = set()
    bridges: List[BridgePlayer] = []

    if identities:
        groups: Dict[str, List[Tuple[_LeaguePlayer, float]]] = {}
        for player in players:
            identity = identities.get(player.league_id, {}).get(player.name)
            if identity is not None:
                groups.setdefault(identity.canonical_id, []).append((player, identity.confidence))
        for canonical_id, members in groups.items():
            if len({p.league_id for p, _ in members}) < 2:
                continue
            confidence = min(c for _, c in members)
            if confidence < config.bridge_similarity_threshold:
                logger.debug("Identity %s below threshold (%.2f)", canonical_id, confidence)
                continue
            group = [p for p, _ in members]
            bridges.append(_bridge_from_group(group, confidence, canonical_id))
            matched.update(p.key for p in group)

    by_name: Dict[str, List[_LeaguePlayer]] = {}
    for player in players:
        if player.key not in matched:
            by_name.setdefault(player.normalized, []).append(player)
    for normalized, group in by_name.items():
        if len({p.league_id for p in group}) < 2:
            continue
        bridges.append(_bridge_from_group(group, 1.0, normalized))
        matched.update(p.key for p in group)

    by_league: Dict[str, List[_LeaguePlayer]] = {}
    for player in players:
        if player.key not in matched:
            by_league.setdefault(player.league_id, []).append(player)
    league_ids = list(by_league)
    for i, first_league in enumerate(league_ids):
        for second_league in league_ids[i + 1:]:
            for a in by_league[first_league]:
                if a.key in matched:
                    continue
                for b in by_league[second_league]:
                    if b.key in matched:
                        continue
                    similarity = name_similarity(a.normalized, b.normalized)
                    if similarity < config.bridge_similarity_threshold:
                        continue
                    bridges.append(_bridge_from_group([a, b], similarity, a.normalized))
                    matched.add(a.key)
                    matched.add(b.key)
                    break

    logger.debug("Found %d cross-league bridge players", len(bridges))
    return bridges


def find_all_bridge_players(
    leagues: Dict[str, LeagueSnapshot],
    identities: Optional[Dict[str, Dict[str, PlayerIdentity]]] = None,
    config: Optional[CalibrationConfig] = None,
) -> List[BridgePlayer]:
    """Intra-league bridges for every league followed by cross-league bridges."""
    bridges = []
    for league_id, snapshot in leagues.items():
        bridges.extend(find_intra_league_bridge_players(snapshot, league_id))
    bridges.extend(find_cross_league_bridge_players(leagues, identities, config))
    return bridges
