"""Player-versus-player records from frame data."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..models.match import MatchFrames, most_recent_first

STRONG_ADVANTAGE = 70.0
MODERATE_ADVANTAGE = 60.0
EVEN_MATCHUP = 40.0

# Meetings needed for full confidence in a record
FULL_CONFIDENCE_MEETINGS = 10


@dataclass
class H2HRecord:
    """Head-to-head record from ``player_a``'s point of view."""

    player_a: str
    player_b: str
    wins: int = 0
    losses: int = 0
    # (date, winner) pairs, most recent first
    details: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def played(self) -> int:
        return self.wins + self.losses

    @property
    def net(self) -> int:
        return self.wins - self.losses


@dataclass
class H2HAnalysis:
    record: H2HRecord
    recent_form: List[Tuple[str, bool]]
    advantage: str  # "strong", "moderate", "even" or "disadvantage"
    confidence: float


@dataclass(frozen=True)
class FrameHistoryEntry:
    date: str
    won: bool
    opponent: str
    break_and_dish: bool


def head_to_head(player_a: str, player_b: str, frames: Iterable[MatchFrames]) -> H2HRecord:
    """
    Every frame in which the two players met.

    Args:
        player_a: Perspective player
        player_b: Opponent
        frames: Frame-level match records

    Returns:
        Record with wins/losses for ``player_a``; empty when they never met
    """
    record = H2HRecord(player_a=player_a, player_b=player_b)
    for match in most_recent_first(frames):
        for frame in match.frames:
            a_home = frame.home_player == player_a and frame.away_player == player_b
            a_away = frame.home_player == player_b and frame.away_player == player_a
            if not (a_home or a_away):
                continue
            if frame.player_won(player_a):
                record.wins += 1
                record.details.append((match.date, player_a))
            else:
                record.losses += 1
                record.details.append((match.date, player_b))
    return record


def analyze_head_to_head(
    player_a: str, player_b: str, frames: Iterable[MatchFrames]
) -> Optional[H2HAnalysis]:
    """Label the matchup by ``player_a``'s win rate; None when they never met."""
    record = head_to_head(player_a, player_b, frames)
    if record.played == 0:
        return None

    pct = (record.wins / record.played) * 100
    if pct >= STRONG_ADVANTAGE:
        advantage = "strong"
    elif pct >= MODERATE_ADVANTAGE:
        advantage = "moderate"
    elif pct >= EVEN_MATCHUP:
        advantage = "even"
    else:
        advantage = "disadvantage"

    return H2HAnalysis(
        record=record,
        recent_form=[(date, winner == player_a) for date, winner in record.details[:5]],
        advantage=advantage,
        confidence=min(1.0, record.played / FULL_CONFIDENCE_MEETINGS),
    )


def team_frame_players(team: str, frames: Iterable[MatchFrames]) -> Set[str]:
    """Everyone who has played a frame for ``team``."""
    players = set()
    for match in frames:
        players.update(match.players_for(team))
    return players


def squad_head_to_head(
    team_a: str,
    team_b: str,
    frames: Iterable[MatchFrames],
    rosters: Dict[str, List[str]],
) -> List[H2HRecord]:
    """
    Records for every pairing of the two squads that has actually met.

    Squads are frame appearances plus any roster listing the team.

    Returns:
        Records sorted by number of meetings, most first
    """
    frames = list(frames)
    squad_a = team_frame_players(team_a, frames)
    squad_b = team_frame_players(team_b, frames)
    for key, roster in rosters.items():
        roster_team = key.partition(":")[2]
        if roster_team == team_a:
            squad_a.update(roster)
        if roster_team == team_b:
            squad_b.update(roster)

    records = []
    for a in sorted(squad_a):
        for b in sorted(squad_b):
            record = head_to_head(a, b, frames)
            if record.played > 0:
                records.append(record)
    return sorted(records, key=lambda r: r.played, reverse=True)


def player_frame_history(player: str, frames: Iterable[MatchFrames]) -> List[FrameHistoryEntry]:
    """Every frame ``player`` played, most recent first, with break-and-dish flags."""
    history = []
    for match in most_recent_first(frames):
        for frame in match.frames:
            if frame.home_player == player:
                opponent = frame.away_player
            elif frame.away_player == player:
                opponent = frame.home_player
            else:
                continue
            history.append(FrameHistoryEntry(
                date=match.date,
                won=frame.player_won(player),
                opponent=opponent,
                break_and_dish=frame.break_and_dish,
            ))
    return history
