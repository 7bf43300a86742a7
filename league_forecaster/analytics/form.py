"""Recent-form analysis for individual players."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models.match import MatchFrames, most_recent_first

FORM_WINDOW_SMALL = 5
FORM_WINDOW_MEDIUM = 8
FORM_WINDOW_LARGE = 10

HOT_THRESHOLD = 65.0
COLD_THRESHOLD = 40.0
MIN_GAMES_FOR_TREND = 5

# Games the medium window needs before it is preferred over the small one
MIN_MEDIUM_WINDOW_GAMES = 6


@dataclass(frozen=True)
class PlayerGame:
    """One frame from a player's point of view."""

    date: str
    won: bool
    opponent: str
    match_id: str


@dataclass(frozen=True)
class FormWindow:
    played: int
    won: int
    pct: float  # 0-100

    @classmethod
    def from_games(cls, games: List[PlayerGame]) -> "FormWindow":
        won = sum(1 for g in games if g.won)
        pct = (won / len(games)) * 100 if games else 0.0
        return cls(played=len(games), won=won, pct=pct)


@dataclass(frozen=True)
class Streak:
    kind: str  # "win", "loss" or "none"
    count: int
    dates: List[str] = field(default_factory=list)


@dataclass
class PlayerForm:
    """Form summary over the player's most recent frames."""

    player: str
    last5: FormWindow
    last8: FormWindow
    last10: FormWindow
    season_pct: float
    trend: str  # "hot", "cold" or "steady"
    streak: Streak
    # Recency-weighted last-five result, -1 (all losses) to 1 (all wins)
    momentum: float
    recent_games: List[PlayerGame] = field(default_factory=list)


def player_games(player: str, frames: Iterable[MatchFrames]) -> List[PlayerGame]:
    """
    Every frame ``player`` played, most recent match first.

    Names are matched exactly. Frames within a match keep their order.
    """
    games = []
    for match in most_recent_first(frames):
        for frame in match.frames:
            if frame.home_player == player:
                opponent = frame.away_player
            elif frame.away_player == player:
                opponent = frame.home_player
            else:
                continue
            games.append(PlayerGame(
                date=match.date,
                won=frame.player_won(player),
                opponent=opponent,
                match_id=match.match_id,
            ))
    return games


def _streak(games: List[PlayerGame]) -> Streak:
    if not games:
        return Streak(kind="none", count=0)
    first = games[0].won
    dates = []
    for game in games:
        if game.won != first:
            break
        dates.append(game.date)
    return Streak(kind="win" if first else "loss", count=len(dates), dates=dates)


def _momentum(games: List[PlayerGame]) -> float:
    window = games[:FORM_WINDOW_SMALL]
    if not window:
        return 0.0
    weights = [FORM_WINDOW_SMALL - i for i in range(len(window))]
    weighted = sum(w for w, g in zip(weights, window) if g.won) / sum(weights)
    return (weighted - 0.5) * 2


def player_form(player: str, frames: Iterable[MatchFrames]) -> Optional[PlayerForm]:
    """
    Rolling form for a player.

    Args:
        player: Exact player name
        frames: Frame-level match records

    Returns:
        PlayerForm, or None when the player has no recorded frames
    """
    games = player_games(player, frames)
    if not games:
        return None

    last5 = FormWindow.from_games(games[:FORM_WINDOW_SMALL])
    trend = "steady"
    if last5.played >= MIN_GAMES_FOR_TREND:
        if last5.pct >= HOT_THRESHOLD:
            trend = "hot"
        elif last5.pct < COLD_THRESHOLD:
            trend = "cold"

    return PlayerForm(
        player=player,
        last5=last5,
        last8=FormWindow.from_games(games[:FORM_WINDOW_MEDIUM]),
        last10=FormWindow.from_games(games[:FORM_WINDOW_LARGE]),
        season_pct=FormWindow.from_games(games).pct,
        trend=trend,
        streak=_streak(games),
        momentum=_momentum(games),
        recent_games=games[:FORM_WINDOW_LARGE],
    )


def form_pct(form: PlayerForm) -> float:
    """Last-8 percentage when it has enough games, otherwise last-5."""
    if form.last8.played >= MIN_MEDIUM_WINDOW_GAMES:
        return form.last8.pct
    return form.last5.pct
