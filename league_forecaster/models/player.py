"""Player statistics records."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PlayerTeamStats:
    """A player's season statistics for one team in one division."""

    team: str
    division: str
    played: int
    won: int
    pct: float  # win percentage, 0-100
    lag: int = 0
    bd_for: int = 0
    bd_against: int = 0
    forfeits: int = 0
    cup: bool = False

    def to_dict(self) -> dict:
        return {
            "team": self.team,
            "division": self.division,
            "played": self.played,
            "won": self.won,
            "pct": self.pct,
            "lag": self.lag,
            "bd_for": self.bd_for,
            "bd_against": self.bd_against,
            "forfeits": self.forfeits,
            "cup": self.cup,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerTeamStats":
        played = int(data.get("played", 0))
        won = int(data.get("won", 0))
        pct = data.get("pct")
        if pct is None:
            pct = (won / played) * 100 if played > 0 else 0.0
        return cls(
            team=data["team"],
            division=data["division"],
            played=played,
            won=won,
            pct=float(pct),
            lag=int(data.get("lag", 0)),
            bd_for=int(data.get("bd_for", 0)),
            bd_against=int(data.get("bd_against", 0)),
            forfeits=int(data.get("forfeits", 0)),
            cup=bool(data.get("cup", False)),
        )


@dataclass(frozen=True)
class PlayerSeason:
    """
    All of a player's team contexts for the current season.

    A player rostered on several teams, or transferred mid-season, has one
    ``PlayerTeamStats`` entry per team.
    """

    teams: List[PlayerTeamStats] = field(default_factory=list)

    @property
    def played(self) -> int:
        return sum(t.played for t in self.teams)

    @property
    def won(self) -> int:
        return sum(t.won for t in self.teams)

    @property
    def pct(self) -> float:
        return (self.won / self.played) * 100 if self.played > 0 else 0.0

    @property
    def league_teams(self) -> List[PlayerTeamStats]:
        """Contexts excluding cup competitions."""
        return [t for t in self.teams if not t.cup]

    def for_team(self, team: str) -> Optional[PlayerTeamStats]:
        for entry in self.teams:
            if entry.team == team:
                return entry
        return None

    def to_dict(self) -> dict:
        return {"teams": [t.to_dict() for t in self.teams]}

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerSeason":
        return cls(teams=[PlayerTeamStats.from_dict(t) for t in data.get("teams", [])])


@dataclass(frozen=True)
class PriorPlayerStats:
    """Single aggregate for a player from the prior period."""

    rating: float
    win_pct: float  # 0-1
    played: int

    @classmethod
    def from_dict(cls, data: dict) -> "PriorPlayerStats":
        return cls(
            rating=float(data.get("rating", 0.0)),
            win_pct=float(data.get("win_pct", 0.0)),
            played=int(data.get("played", 0)),
        )
