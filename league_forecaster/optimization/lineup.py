"""
Lineup optimization.

Players are scored on a composite of Bayesian-adjusted win rate, recent
form, head-to-head record against the opponent's likely players and venue
split. Locked (set, position) requests are honoured first and the remaining
slots are filled in score order. Candidate lineups are priced with the
single-match Monte Carlo routine.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..analytics.form import form_pct, player_form
from ..analytics.head_to_head import head_to_head
from ..analytics.scouting import predict_lineup
from ..analytics.splits import player_home_away, set_performance
from ..data.player_stats import team_players
from ..models.league import LeagueSnapshot
from ..predictors.strength import StrengthEstimator, bayesian_pct, win_pct_to_strength
from ..simulation.monte_carlo import SeasonSimulator

logger = logging.getLogger(__name__)


@dataclass
class LineupConfig:
    """Configuration for lineup scoring and assembly."""

    min_games: int = 3
    form_weight: float = 0.3
    # Score points per net head-to-head win
    h2h_weight: float = 5.0
    venue_weight: float = 0.2
    min_venue_games: int = 3
    # Opponent set-1 bias (percentage points) that flips our best five to set 2
    set_bias_threshold: float = 5.0
    min_rated_players: int = 5
    set_size: int = 5
    recent_matches: int = 3
    num_alternatives: int = 3
    max_swap_attempts: int = 20
    h2h_insight_threshold: int = 2

    def __post_init__(self):
        if self.set_size < 1:
            raise ValueError("set_size must be >= 1")
        if self.min_games < 0:
            raise ValueError("min_games must be >= 0")

    @property
    def lineup_size(self) -> int:
        return self.set_size * 2

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "LineupConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class LockedPosition:
    """Request to fix ``player`` at ``position`` (1-5) of set 1 or 2."""

    player: str
    set_number: int
    position: int

    def is_valid(self, set_size: int = 5) -> bool:
        return self.set_number in (1, 2) and 1 <= self.position <= set_size


@dataclass(frozen=True)
class PlayerAvailability:
    name: str
    available: bool = True


@dataclass
class ScoredPlayer:
    name: str
    score: float
    adj_pct: float
    form_pct: Optional[float] = None
    h2h_advantage: int = 0
    venue_pct: Optional[float] = None
    trend: Optional[str] = None


@dataclass
class LineupWinProbability:
    """Match outcome probabilities from the optimized team's side."""

    win: float
    draw: float
    loss: float
    expected_for: float
    expected_against: float
    confidence: float
    used_fallback: bool = False


@dataclass
class OptimizedLineup:
    set1: List[str]
    set2: List[str]
    win_probability: LineupWinProbability
    insights: List[str] = field(default_factory=list)
    # True when the best players were moved to set 2
    inverted: bool = False

    @property
    def players(self) -> List[str]:
        return self.set1 + self.set2


@dataclass
class LineupAlternative:
    lineup: OptimizedLineup
    rank: int
    # Optimal win probability minus this lineup's
    probability_deficit: float


def _lineup_key(set1: Sequence[str], set2: Sequence[str]) -> Tuple[str, ...]:
    return tuple(sorted(list(set1) + list(set2)))


class LineupOptimizer:
    """
    Builds and prices two-set lineups for a team against an opponent.

    All data comes from the snapshot supplied at construction.
    """

    def __init__(
        self,
        snapshot: LeagueSnapshot,
        config: Optional[LineupConfig] = None,
        simulator: Optional[SeasonSimulator] = None,
        estimator: Optional[StrengthEstimator] = None,
    ):
        """
        Initialize optimizer.

        Args:
            snapshot: League data
            config: Lineup configuration
            simulator: Provides the matchup model and single-match simulation
            estimator: Team strength estimator used for the opponent
        """
        self.snapshot = snapshot
        self.config = config or LineupConfig()
        self.simulator = simulator or SeasonSimulator()
        self.estimator = estimator or StrengthEstimator()
        self._strength_cache: Dict[str, Dict[str, float]] = {}

    def _season_record(self, name: str) -> Tuple[int, int]:
        season = self.snapshot.players.get(name)
        if season is None:
            return 0, 0
        return season.won, season.played

    def _team_strength(self, team: str) -> float:
        division = self.snapshot.division_of(team)
        if division is None:
            return 0.0
        if division not in self._strength_cache:
            self._strength_cache[division] = self.estimator.team_strengths(self.snapshot, division)
        return self._strength_cache[division].get(team, 0.0)

    def score_players(self, names: Iterable[str], opponent: str, is_home: bool) -> List[ScoredPlayer]:
        """
        Composite scores for eligible players.

        Players with fewer than ``min_games`` current-season games are left
        out.

        Args:
            names: Candidate players
            opponent: Opposing team
            is_home: Whether the candidates play at home

        Returns:
            Scored players, best first
        """
        cfg = self.config
        frames = self.snapshot.frames
        likely_opponents = predict_lineup(opponent, frames, cfg.recent_matches).recent_players if frames else []

        scored = []
        for name in names:
            won, played = self._season_record(name)
            if played < cfg.min_games:
                continue
            adj = bayesian_pct(won, played)
            score = adj

            form = player_form(name, frames) if frames else None
            current_form = form_pct(form) if form else None
            if current_form is not None:
                score += (current_form - adj) * cfg.form_weight

            h2h = 0
            for opp in likely_opponents:
                h2h += head_to_head(name, opp, frames).net
            score += h2h * cfg.h2h_weight

            venue_pct = None
            if frames:
                split = player_home_away(name, frames)
                venue = split.home if is_home else split.away
                venue_pct = venue.pct
                if venue.played >= cfg.min_venue_games:
                    score += (venue.pct - adj) * cfg.venue_weight

            scored.append(ScoredPlayer(
                name=name,
                score=score,
                adj_pct=adj,
                form_pct=current_form,
                h2h_advantage=h2h,
                venue_pct=venue_pct,
                trend=form.trend if form else None,
            ))

        return sorted(scored, key=lambda p: p.score, reverse=True)

    def _available(self, team: str, availability, roster) -> List[str]:
        if roster is None:
            roster = [p.name for p in team_players(self.snapshot, team)]
        if availability is None:
            return list(roster)
        available = {a.name for a in availability if a.available}
        return [name for name in roster if name in available]

    def _resolve_locks(self, locks: Iterable[LockedPosition], available: List[str]) -> Dict[Tuple[int, int], str]:
        """Valid locks keyed by (set, position); the first claim on a slot or player wins."""
        resolved: Dict[Tuple[int, int], str] = {}
        for lock in locks:
            if not lock.is_valid(self.config.set_size):
                logger.debug("Dropping invalid lock %s", lock)
                continue
            slot = (lock.set_number, lock.position)
            if slot in resolved or lock.player in resolved.values() or lock.player not in available:
                continue
            resolved[slot] = lock.player
        return resolved

    def _candidate_order(self, available: List[str], scored: List[ScoredPlayer]) -> List[str]:
        """Eligible players by score, then the rest by adjusted win rate."""
        order = [p.name for p in scored]
        eligible = set(order)
        rest = [name for name in available if name not in eligible]
        rest.sort(key=lambda n: bayesian_pct(*self._season_record(n)), reverse=True)
        return order + rest

    def optimize(
        self,
        team: str,
        opponent: str,
        is_home: bool,
        availability: Optional[Iterable[PlayerAvailability]] = None,
        locks: Iterable[LockedPosition] = (),
        roster: Optional[Sequence[str]] = None,
    ) -> Optional[OptimizedLineup]:
        """
        Best lineup for ``team`` against ``opponent``.

        Args:
            team: Our team
            opponent: Opposing team
            is_home: Whether we play at home
            availability: Availability flags; everyone on the roster when omitted
            locks: Fixed (player, set, position) requests; invalid ones are dropped
            roster: Candidate players; defaults to the team's roster and
                current-season players

        Returns:
            OptimizedLineup, or None when fewer than ten players are available
        """
        cfg = self.config
        available = self._available(team, availability, roster)
        if len(available) < cfg.lineup_size:
            logger.debug("%s has %d available players, need %d", team, len(available), cfg.lineup_size)
            return None

        locked = self._resolve_locks(locks, available)
        scored = self.score_players(available, opponent, is_home)
        candidates = [n for n in self._candidate_order(available, scored) if n not in locked.values()]

        opp_sets = set_performance(opponent, self.snapshot.frames)
        inverted = opp_sets is not None and opp_sets.bias > cfg.set_bias_threshold

        sets = {
            1: [locked.get((1, pos)) for pos in range(1, cfg.set_size + 1)],
            2: [locked.get((2, pos)) for pos in range(1, cfg.set_size + 1)],
        }
        fill_order = (2, 1) if inverted else (1, 2)
        queue = iter(candidates)
        for set_number in fill_order:
            slots = sets[set_number]
            for i, name in enumerate(slots):
                if name is None:
                    slots[i] = next(queue, None)

        if any(name is None for name in sets[1] + sets[2]):
            return None

        win_probability = self.win_probability(sets[1], sets[2], team, opponent, is_home)
        lineup = OptimizedLineup(
            set1=sets[1],
            set2=sets[2],
            win_probability=win_probability,
            inverted=inverted,
        )
        lineup.insights = self.insights(team, scored, inverted)
        return lineup

    def win_probability(
        self,
        set1: Sequence[str],
        set2: Sequence[str],
        team: str,
        opponent: str,
        is_home: bool,
    ) -> LineupWinProbability:
        """
        Price a lineup with the single-match simulation.

        Falls back to team strengths when fewer than ``min_rated_players`` of
        the lineup have current-season games.
        """
        cfg = self.config
        rated = []
        for name in list(set1) + list(set2):
            won, played = self._season_record(name)
            if played > 0:
                rated.append(bayesian_pct(won, played))

        fallback = len(rated) < cfg.min_rated_players
        if fallback:
            if self.snapshot.division_of(team) is None:
                frames = self.simulator.config.frames_per_match
                return LineupWinProbability(0.0, 0.0, 1.0, 0.0, float(frames), 1.0, used_fallback=True)
            logger.info("Lineup for %s has %d rated players, using team strength", team, len(rated))
            own = self._team_strength(team)
        else:
            own = win_pct_to_strength(sum(rated) / len(rated) / 100)
        other = self._team_strength(opponent)

        home, away = (own, other) if is_home else (other, own)
        p = self.simulator.matchup.frame_win_probability(home, away)
        prediction = self.simulator.predict_match(p)

        if is_home:
            win, loss = prediction.home_win, prediction.away_win
            expected_for, expected_against = prediction.expected_home, prediction.expected_away
        else:
            win, loss = prediction.away_win, prediction.home_win
            expected_for, expected_against = prediction.expected_away, prediction.expected_home

        return LineupWinProbability(
            win=win,
            draw=prediction.draw,
            loss=loss,
            expected_for=expected_for,
            expected_against=expected_against,
            confidence=max(win, prediction.draw, loss),
            used_fallback=fallback,
        )

    def alternatives(
        self,
        optimal: OptimizedLineup,
        team: str,
        opponent: str,
        is_home: bool,
        availability: Optional[Iterable[PlayerAvailability]] = None,
        locks: Iterable[LockedPosition] = (),
        roster: Optional[Sequence[str]] = None,
        num_alternatives: Optional[int] = None,
    ) -> List[LineupAlternative]:
        """
        Single-swap variations of ``optimal``.

        Each attempt swaps one bench player with one unlocked starter. Locked
        slots are never touched and lineups with the same player set are
        kept once.

        Returns:
            Alternatives ranked by win probability
        """
        cfg = self.config
        n = cfg.num_alternatives if num_alternatives is None else num_alternatives
        available = self._available(team, availability, roster)
        locked = self._resolve_locks(locks, available)
        scored = self.score_players(available, opponent, is_home)
        order = self._candidate_order(available, scored)

        starters = set(optimal.players)
        locked_players = set(locked.values())
        bench = [p for p in order if p not in starters and p not in locked_players]
        swappable = [p for p in order if p in starters and p not in locked_players]
        if not bench or not swappable:
            return []

        seen = {_lineup_key(optimal.set1, optimal.set2)}
        found: List[OptimizedLineup] = []
        max_attempts = min(n * 3, cfg.max_swap_attempts)
        for attempt in range(1, max_attempts + 1):
            if len(found) >= n:
                break
            incoming = bench[attempt % len(bench)]
            outgoing = swappable[attempt % len(swappable)]

            alt = {1: list(optimal.set1), 2: list(optimal.set2)}
            swapped = False
            for set_number in (1, 2):
                for i, name in enumerate(alt[set_number]):
                    if name == outgoing and (set_number, i + 1) not in locked:
                        alt[set_number][i] = incoming
                        swapped = True
                        break
                if swapped:
                    break
            if not swapped:
                continue

            key = _lineup_key(alt[1], alt[2])
            if key in seen:
                continue
            seen.add(key)
            found.append(OptimizedLineup(
                set1=alt[1],
                set2=alt[2],
                win_probability=self.win_probability(alt[1], alt[2], team, opponent, is_home),
            ))

        found.sort(key=lambda lineup: lineup.win_probability.win, reverse=True)
        best = optimal.win_probability.win
        return [
            LineupAlternative(lineup=lineup, rank=i + 1, probability_deficit=best - lineup.win_probability.win)
            for i, lineup in enumerate(found[:n])
        ]

    def insights(self, team: str, scored: List[ScoredPlayer], inverted: bool) -> List[str]:
        """Short tactical notes for a lineup."""
        cfg = self.config
        notes = []

        def describe(player: ScoredPlayer) -> str:
            return f"{player.name} ({round(player.form_pct or 0)}% recent vs {round(player.adj_pct)}% adjusted)"

        hot = [p for p in scored if p.trend == "hot"][:3]
        cold = [p for p in scored if p.trend == "cold"][:3]
        if hot:
            notes.append("In form: " + ", ".join(describe(p) for p in hot))
        if cold:
            notes.append("Out of form: " + ", ".join(describe(p) for p in cold))
        if inverted:
            notes.append("Opponent is stronger in set 1, best players saved for set 2")

        h2h = [p for p in scored if p.h2h_advantage >= cfg.h2h_insight_threshold][:3]
        if h2h:
            notes.append("H2H advantage: " + ", ".join(f"{p.name} (+{p.h2h_advantage})" for p in h2h))

        excluded = []
        for player in team_players(self.snapshot, team):
            if player.current is not None and 0 < player.current.played < cfg.min_games:
                excluded.append(player.name)
        if excluded:
            notes.append(f"Excluded (<{cfg.min_games} games): " + ", ".join(excluded))
        return notes
