"""
Adjusted ratings comparable across divisions and leagues.

A rating starts from the Bayesian win percentage in its own context and
adds the division and league offsets. The z-score and percentiles are
computed inside the player's own division and league, so they describe
standing among peers rather than the calibrated level.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from scipy.stats import percentileofscore

from ..models.league import LeagueSnapshot
from ..predictors.strength import bayesian_pct
from .bridge_players import BridgePlayer, find_all_bridge_players
from .config import CalibrationConfig
from .identity import PlayerIdentity
from .league_strength import LeagueStrength, calculate_league_strengths

logger = logging.getLogger(__name__)


@dataclass
class AdjustedRating:
    name: str
    league_id: str
    division: str
    raw_pct: float
    bayesian_pct: float
    adjusted_pct: float
    z_score: float
    division_percentile: float
    league_percentile: float
    confidence: float
    division_offset: float
    league_offset: float
    # Filled by global_percentiles once every league is rated
    global_percentile: Optional[float] = None

    @property
    def total_adjustment(self) -> float:
        return self.division_offset + self.league_offset


def _distribution(values: List[float]):
    if not values:
        return 50.0, 1.0
    std = float(np.std(values))
    return float(np.mean(values)), std or 1.0


def _percentile(value: float, pool: List[float]) -> float:
    """Share of the pool strictly below ``value``, 0-100."""
    if not pool:
        return 50.0
    return float(percentileofscore(pool, value, kind="strict"))


class AdjustedRatingCalculator:
    """
    Rates players and teams using solved league and division strengths.

    Args:
        leagues: league id -> snapshot
        strengths: Output of ``calculate_league_strengths``
        config: Calibration configuration; ``min_context_games`` also sets
            the minimum games for the z-score and percentile pools
    """

    def __init__(
        self,
        leagues: Dict[str, LeagueSnapshot],
        strengths: List[LeagueStrength],
        config: Optional[CalibrationConfig] = None,
    ):
        self.leagues = leagues
        self.strengths = {s.league_id: s for s in strengths}
        self.config = config or CalibrationConfig()

    def _offsets(self, league_id: str, division: str):
        league = self.strengths.get(league_id)
        div = league.division(division) if league else None
        division_offset = div.offset if div else 0.0
        league_offset = league.offset if league else 0.0
        confidence = min(div.confidence if div else 0.0, league.confidence if league else 0.0)
        return division_offset, league_offset, confidence

    def _division_player_pool(self, snapshot: LeagueSnapshot, division: str) -> List[float]:
        return [
            bayesian_pct(stats.won, stats.played)
            for season in snapshot.players.values()
            for stats in season.league_teams
            if stats.division == division and stats.played >= self.config.min_context_games
        ]

    def _league_player_pool(self, snapshot: LeagueSnapshot) -> List[float]:
        return [
            bayesian_pct(season.won, season.played)
            for season in snapshot.players.values()
            if season.played >= self.config.min_context_games
        ]

    def _team_totals(self, snapshot: LeagueSnapshot, team: str):
        won = played = 0
        for season in snapshot.players.values():
            for stats in season.league_teams:
                if stats.team == team:
                    won += stats.won
                    played += stats.played
        return won, played

    def _division_team_pool(self, snapshot: LeagueSnapshot, division: str) -> List[float]:
        rates = []
        for team in snapshot.division_teams(division):
            won, played = self._team_totals(snapshot, team)
            if played >= self.config.min_context_games:
                rates.append(bayesian_pct(won, played))
        return rates

    def _build_rating(
        self,
        name: str,
        league_id: str,
        division: str,
        raw: float,
        adjusted_base: float,
        division_pool: List[float],
        league_pool: List[float],
    ) -> AdjustedRating:
        division_offset, league_offset, confidence = self._offsets(league_id, division)
        mean, std = _distribution(division_pool)
        return AdjustedRating(
            name=name,
            league_id=league_id,
            division=division,
            raw_pct=raw,
            bayesian_pct=adjusted_base,
            adjusted_pct=adjusted_base + division_offset + league_offset,
            z_score=(adjusted_base - mean) / std,
            division_percentile=_percentile(adjusted_base, division_pool),
            league_percentile=_percentile(adjusted_base, league_pool),
            confidence=confidence,
            division_offset=division_offset,
            league_offset=league_offset,
        )

    def player_rating(self, name: str, league_id: str, division: str) -> Optional[AdjustedRating]:
        """
        Rating for a player's non-cup context in ``division``.

        Returns:
            AdjustedRating, or None when the league, player or context is
            unknown or the context has no games
        """
        snapshot = self.leagues.get(league_id)
        if snapshot is None:
            return None
        season = snapshot.players.get(name)
        if season is None:
            return None
        stats = next((s for s in season.league_teams if s.division == division), None)
        if stats is None or stats.played == 0:
            return None

        return self._build_rating(
            name,
            league_id,
            division,
            stats.pct,
            bayesian_pct(stats.won, stats.played),
            self._division_player_pool(snapshot, division),
            self._league_player_pool(snapshot),
        )

    def team_rating(self, team: str, league_id: str, division: Optional[str] = None) -> Optional[AdjustedRating]:
        """
        Rating for a team from the pooled non-cup records of its players.

        The team is compared against the other teams of its division for both
        the z-score and the percentiles.
        """
        snapshot = self.leagues.get(league_id)
        if snapshot is None:
            return None
        division = division or snapshot.division_of(team)
        if division is None:
            return None
        won, played = self._team_totals(snapshot, team)
        if played == 0:
            return None

        pool = self._division_team_pool(snapshot, division)
        return self._build_rating(
            team,
            league_id,
            division,
            won / played * 100,
            bayesian_pct(won, played),
            pool,
            pool,
        )


def global_percentiles(ratings: Dict[str, AdjustedRating]) -> Dict[str, float]:
    """
    Rank-based percentile of every rating across all leagues.

    The lowest adjusted percentage gets 100/n and the highest 100. Each
    rating's ``global_percentile`` is updated in place as well.
    """
    ordered = sorted(ratings.items(), key=lambda item: item[1].adjusted_pct)
    n = len(ordered)
    result = {}
    for i, (key, rating) in enumerate(ordered):
        rating.global_percentile = (i + 1) / n * 100
        result[key] = rating.global_percentile
    return result


@dataclass
class CalibrationResult:
    bridge_players: List[BridgePlayer]
    league_strengths: List[LeagueStrength]
    calculator: AdjustedRatingCalculator


def calibrate(
    leagues: Dict[str, LeagueSnapshot],
    identities: Optional[Dict[str, Dict[str, PlayerIdentity]]] = None,
    config: Optional[CalibrationConfig] = None,
) -> CalibrationResult:
    """Detect bridge players, solve every offset and build a rating calculator."""
    config = config or CalibrationConfig()
    bridges = find_all_bridge_players(leagues, identities, config)
    strengths = calculate_league_strengths(leagues, bridges, config)
    logger.info("Calibrated %d leagues from %d bridge players", len(strengths), len(bridges))
    return CalibrationResult(
        bridge_players=bridges,
        league_strengths=strengths,
        calculator=AdjustedRatingCalculator(leagues, strengths, config),
    )
