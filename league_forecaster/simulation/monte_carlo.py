"""
Monte Carlo simulation engine for league seasons and single matches.

Every remaining fixture is played out frame by frame: each of the ten frames
is an independent Bernoulli trial at the matchup model's frame-win
probability, so simulated matches carry realistic draws and close scores
rather than a binary result.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..data.fixtures import remaining_fixtures
from ..data.player_stats import strength_adjustments
from ..models.league import LeagueSnapshot, SquadOverride
from ..models.match import FRAMES_PER_MATCH, Fixture, WhatIfResult
from ..models.standings import AWAY_WIN_POINTS, DRAW_POINTS, HOME_WIN_POINTS, StandingEntry, calc_standings
from ..predictors.base import BasePredictor
from ..predictors.matchup import MatchupModel
from ..predictors.strength import StrengthEstimator

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for Monte Carlo simulation."""

    num_simulations: int = 1000
    # Runs used for a single-match prediction
    prediction_simulations: int = 5000
    frames_per_match: int = FRAMES_PER_MATCH
    random_seed: Optional[int] = None
    top_scores: int = 5

    def __post_init__(self):
        if self.num_simulations < 1:
            raise ValueError("num_simulations must be >= 1")
        if self.prediction_simulations < 1:
            raise ValueError("prediction_simulations must be >= 1")
        if self.frames_per_match < 1:
            raise ValueError("frames_per_match must be >= 1")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def wilson_interval(p: float, n: int, z: float = 1.96) -> Tuple[float, float]:
    """Wilson score interval for a simulated frequency."""
    if n <= 0:
        return 0.0, 1.0
    denom = 1 + z**2 / n
    center = (p + z**2 / (2 * n)) / denom
    margin = z * math.sqrt(p * (1 - p) / n + z**2 / (4 * n**2)) / denom
    return max(0.0, center - margin), min(1.0, center + margin)


@dataclass
class TeamProjection:
    """Simulated season outcome for one team."""

    team: str
    current_points: int
    average_points: float
    position_odds: List[float]
    title_odds: float
    top_two_odds: float
    bottom_two_odds: float
    num_simulations: int = 0

    # Wilson score intervals, keyed by "title", "top_two", "bottom_two"
    ci_lower: Dict[str, float] = field(default_factory=dict)
    ci_upper: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "team": self.team,
            "current_points": self.current_points,
            "average_points": round(self.average_points, 1),
            "position_odds": [round(p, 4) for p in self.position_odds],
            "title_odds": self.title_odds,
            "top_two_odds": self.top_two_odds,
            "bottom_two_odds": self.bottom_two_odds,
            "ci_lower": dict(self.ci_lower),
            "ci_upper": dict(self.ci_upper),
        }


@dataclass
class MatchPrediction:
    """Single-match Monte Carlo outcome. Probabilities are 0-1."""

    home_win: float
    draw: float
    away_win: float
    expected_home: float
    expected_away: float
    # ("7-3", probability) pairs, most likely first
    top_scores: List[Tuple[str, float]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "home_win": self.home_win,
            "draw": self.draw,
            "away_win": self.away_win,
            "expected_home": round(self.expected_home, 1),
            "expected_away": round(self.expected_away, 1),
            "top_scores": [{"score": s, "probability": p} for s, p in self.top_scores],
        }


@dataclass
class FixtureImportance:
    """How much a single fixture swings a team's top-two chances."""

    home: str
    away: str
    date: str
    importance: float
    top_two_if_win: float
    top_two_if_loss: float


def _points(home_frames: np.ndarray, away_frames: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    home_pts = np.where(
        home_frames > away_frames, HOME_WIN_POINTS,
        np.where(home_frames == away_frames, DRAW_POINTS, 0),
    )
    away_pts = np.where(
        away_frames > home_frames, AWAY_WIN_POINTS,
        np.where(home_frames == away_frames, DRAW_POINTS, 0),
    )
    return home_pts, away_pts


class SeasonSimulator:
    """
    Monte Carlo engine for league tables.

    Features:
    - Frame-level Bernoulli sampling of every remaining fixture
    - What-if results spliced in before each run
    - Injectable numpy Generator for reproducible runs
    """

    def __init__(
        self,
        matchup: Optional[BasePredictor] = None,
        config: Optional[SimulationConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the simulator.

        Args:
            matchup: Model providing frame win probabilities
            config: Simulation configuration
            rng: Random generator; seeded from ``config.random_seed`` if omitted
        """
        self.matchup = matchup or MatchupModel()
        self.config = config or SimulationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)

    def simulate_match(self, home_strength: float, away_strength: float) -> Tuple[int, int]:
        """
        Play one match frame by frame.

        Returns:
            (home_frames, away_frames)
        """
        frames = self.config.frames_per_match
        p = self.matchup.frame_win_probability(home_strength, away_strength)
        home = int((self.rng.random(frames) < p).sum())
        return home, frames - home

    def simulate_season(
        self,
        strengths: Dict[str, float],
        standings: Iterable[StandingEntry],
        teams: Sequence[str],
        fixtures: Iterable[Fixture],
        what_ifs: Iterable[WhatIfResult] = (),
    ) -> List[TeamProjection]:
        """
        Run the season to completion ``num_simulations`` times.

        Args:
            strengths: team -> strength (missing teams count as 0)
            standings: Current table entries
            teams: Division teams, in table order for tie-breaking
            fixtures: Remaining fixtures
            what_ifs: Hypothetical results applied before simulating

        Returns:
            Projections sorted by average points, highest first
        """
        teams = list(teams)
        n_teams = len(teams)
        if n_teams == 0:
            return []

        index = {t: i for i, t in enumerate(teams)}
        current = {s.team: s for s in standings}
        base_pts = np.array([current[t].points if t in current else 0 for t in teams], dtype=np.int64)
        base_for = np.array([current[t].frames_for if t in current else 0 for t in teams], dtype=np.int64)
        base_against = np.array([current[t].frames_against if t in current else 0 for t in teams], dtype=np.int64)

        what_if_keys = set()
        for wi in what_ifs:
            what_if_keys.add(wi.key)
            if wi.home not in index or wi.away not in index:
                logger.warning("Ignoring what-if %s outside the division", wi.key)
                continue
            h, a = index[wi.home], index[wi.away]
            home_pts, away_pts = _points(np.array(wi.home_score), np.array(wi.away_score))
            base_pts[h] += int(home_pts)
            base_pts[a] += int(away_pts)
            base_for[h] += wi.home_score
            base_against[h] += wi.away_score
            base_for[a] += wi.away_score
            base_against[a] += wi.home_score

        home_idx, away_idx, probs = [], [], []
        for fixture in fixtures:
            if fixture.home not in index or fixture.away not in index:
                continue
            if f"{fixture.home}:{fixture.away}" in what_if_keys:
                continue
            home_idx.append(index[fixture.home])
            away_idx.append(index[fixture.away])
            probs.append(self.matchup.frame_win_probability(
                strengths.get(fixture.home, 0.0), strengths.get(fixture.away, 0.0)
            ))

        n = self.config.num_simulations
        frames = self.config.frames_per_match
        pts = np.tile(base_pts, (n, 1))
        diff = np.tile(base_for - base_against, (n, 1))

        if probs:
            home_idx = np.array(home_idx)
            away_idx = np.array(away_idx)
            p = np.array(probs)
            home_frames = (self.rng.random((n, len(p), frames)) < p[None, :, None]).sum(axis=2)
            away_frames = frames - home_frames
            home_pts, away_pts = _points(home_frames, away_frames)
            run_idx = np.arange(n)[:, None]
            np.add.at(pts, (run_idx, home_idx[None, :]), home_pts)
            np.add.at(pts, (run_idx, away_idx[None, :]), away_pts)
            np.add.at(diff, (run_idx, home_idx[None, :]), home_frames - away_frames)
            np.add.at(diff, (run_idx, away_idx[None, :]), away_frames - home_frames)

        logger.debug("Simulated %d runs over %d fixtures for %d teams", n, len(probs), n_teams)

        # Points then frame differential, table order breaks remaining ties
        tie_break = np.tile(np.arange(n_teams), (n, 1))
        order = np.lexsort((tie_break, -diff, -pts), axis=1)
        positions = np.zeros((n_teams, n_teams), dtype=np.int64)
        np.add.at(positions, (order, np.tile(np.arange(n_teams), (n, 1))), 1)

        avg_points = pts.mean(axis=0)
        projections = []
        for i, team in enumerate(teams):
            odds = (positions[i] / n).tolist()
            title = odds[0]
            top_two = sum(odds[:2])
            bottom_two = sum(odds[-2:])
            projection = TeamProjection(
                team=team,
                current_points=int(current[team].points) if team in current else 0,
                average_points=float(avg_points[i]),
                position_odds=odds,
                title_odds=title,
                top_two_odds=top_two,
                bottom_two_odds=bottom_two,
                num_simulations=n,
            )
            for band, value in (("title", title), ("top_two", top_two), ("bottom_two", bottom_two)):
                lower, upper = wilson_interval(value, n)
                projection.ci_lower[band] = lower
                projection.ci_upper[band] = upper
            projections.append(projection)

        return sorted(projections, key=lambda proj: proj.average_points, reverse=True)

    def predict_match(self, p: float) -> MatchPrediction:
        """
        Simulate a single match at home frame-win probability ``p``.

        Args:
            p: Home frame win probability

        Returns:
            Win/draw/loss probabilities, expected frames and likeliest scores
        """
        n = self.config.prediction_simulations
        frames = self.config.frames_per_match
        home = (self.rng.random((n, frames)) < p).sum(axis=1)
        away = frames - home

        scores, counts = np.unique(home, return_counts=True)
        ranked = sorted(zip(scores.tolist(), counts.tolist()), key=lambda sc: sc[1], reverse=True)
        top_scores = [
            (f"{h}-{frames - h}", c / n) for h, c in ranked[: self.config.top_scores]
        ]

        return MatchPrediction(
            home_win=float((home > away).mean()),
            draw=float((home == away).mean()),
            away_win=float((home < away).mean()),
            expected_home=p * frames,
            expected_away=(1 - p) * frames,
            top_scores=top_scores,
        )


def _season_inputs(
    snapshot: LeagueSnapshot,
    division: str,
    squad_overrides: Optional[Dict[str, SquadOverride]],
    squad_top_n: Optional[int],
    estimator: Optional[StrengthEstimator],
):
    estimator = estimator or StrengthEstimator()
    strengths = estimator.team_strengths(snapshot, division)
    if squad_overrides:
        for team, adj in strength_adjustments(snapshot, division, squad_overrides, squad_top_n).items():
            if team in strengths:
                strengths[team] += adj
    standings = calc_standings(snapshot, division)
    fixtures = remaining_fixtures(snapshot, division)
    return strengths, standings, fixtures


def run_season_simulation(
    snapshot: LeagueSnapshot,
    division: str,
    squad_overrides: Optional[Dict[str, SquadOverride]] = None,
    squad_top_n: Optional[int] = None,
    what_ifs: Iterable[WhatIfResult] = (),
    simulator: Optional[SeasonSimulator] = None,
    estimator: Optional[StrengthEstimator] = None,
) -> List[TeamProjection]:
    """
    Simulate the rest of a division's season from a league snapshot.

    Strengths (with any squad override adjustments), the current table and
    the remaining fixtures are derived from ``snapshot``.

    Returns:
        Projections sorted by average points; empty for an unknown division
    """
    simulator = simulator or SeasonSimulator()
    strengths, standings, fixtures = _season_inputs(
        snapshot, division, squad_overrides, squad_top_n, estimator
    )
    return simulator.simulate_season(
        strengths, standings, snapshot.division_teams(division), fixtures, what_ifs
    )


def fixture_importance(
    snapshot: LeagueSnapshot,
    division: str,
    team: str,
    squad_overrides: Optional[Dict[str, SquadOverride]] = None,
    squad_top_n: Optional[int] = None,
    what_ifs: Iterable[WhatIfResult] = (),
    simulator: Optional[SeasonSimulator] = None,
    estimator: Optional[StrengthEstimator] = None,
) -> List[FixtureImportance]:
    """
    Rank a team's remaining fixtures by how much they move its top-two odds.

    Each fixture is simulated once as a 7-3 win and once as a 3-7 loss for
    ``team``; importance is the absolute gap in top-two probability.

    Returns:
        Fixtures sorted by importance, highest first
    """
    simulator = simulator or SeasonSimulator()
    what_ifs = list(what_ifs)
    covered = {wi.key for wi in what_ifs}
    strengths, standings, fixtures = _season_inputs(
        snapshot, division, squad_overrides, squad_top_n, estimator
    )
    teams = snapshot.division_teams(division)

    def top_two(extra: WhatIfResult) -> Optional[float]:
        projections = simulator.simulate_season(strengths, standings, teams, fixtures, what_ifs + [extra])
        for proj in projections:
            if proj.team == team:
                return proj.top_two_odds
        return None

    results = []
    for fixture in fixtures:
        if team not in (fixture.home, fixture.away):
            continue
        key = f"{fixture.home}:{fixture.away}"
        if key in covered:
            continue
        is_home = fixture.home == team
        win = WhatIfResult(fixture.home, fixture.away, 7 if is_home else 3, 3 if is_home else 7)
        loss = WhatIfResult(fixture.home, fixture.away, 3 if is_home else 7, 7 if is_home else 3)
        if_win = top_two(win)
        if_loss = top_two(loss)
        if if_win is None or if_loss is None:
            continue
        results.append(FixtureImportance(
            home=fixture.home,
            away=fixture.away,
            date=fixture.date,
            importance=abs(if_win - if_loss),
            top_two_if_win=if_win,
            top_two_if_loss=if_loss,
        ))

    return sorted(results, key=lambda r: r.importance, reverse=True)
