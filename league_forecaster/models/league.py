"""League snapshot: the complete input for one invocation of the engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .match import Fixture, MatchFrames, MatchResult
from .player import PlayerSeason, PriorPlayerStats


@dataclass(frozen=True)
class Division:
    """A division and its ordered team list."""

    code: str
    name: str
    teams: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SquadOverride:
    """Hypothetical roster change for one team."""

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)


def roster_key(division: str, team: str) -> str:
    return f"{division}:{team}"


@dataclass
class LeagueSnapshot:
    """
    Immutable-by-convention bundle of league data.

    Every component takes the snapshot it works on as an argument; there is
    no module-level default dataset.

    Attributes:
        divisions: division code -> Division
        results: completed match results
        fixtures: scheduled fixtures (played or not)
        prior_players: player name -> prior period aggregate
        rosters: "division:team" -> player names
        players: player name -> current season statistics
        frames: frame-level match records
        league_id: identifier used by cross-league calibration
    """

    divisions: Dict[str, Division] = field(default_factory=dict)
    results: List[MatchResult] = field(default_factory=list)
    fixtures: List[Fixture] = field(default_factory=list)
    prior_players: Dict[str, PriorPlayerStats] = field(default_factory=dict)
    rosters: Dict[str, List[str]] = field(default_factory=dict)
    players: Dict[str, PlayerSeason] = field(default_factory=dict)
    frames: List[MatchFrames] = field(default_factory=list)
    league_id: str = ""

    def division_of(self, team: str) -> Optional[str]:
        """Division code containing ``team``, or None."""
        for code, division in self.divisions.items():
            if team in division.teams:
                return code
        return None

    def division_teams(self, division: str) -> List[str]:
        found = self.divisions.get(division)
        return list(found.teams) if found else []

    def roster_for(self, division: str, team: str) -> List[str]:
        return list(self.rosters.get(roster_key(division, team), []))

    @classmethod
    def from_dict(cls, data: dict) -> "LeagueSnapshot":
        divisions = {}
        for code, raw in data.get("divisions", {}).items():
            divisions[code] = Division(
                code=code,
                name=raw.get("name", code),
                teams=list(raw.get("teams", [])),
            )

        return cls(
            divisions=divisions,
            results=[MatchResult.from_dict(r) for r in data.get("results", [])],
            fixtures=[Fixture.from_dict(f) for f in data.get("fixtures", [])],
            prior_players={
                name: PriorPlayerStats.from_dict(raw)
                for name, raw in data.get("prior_players", {}).items()
            },
            rosters={key: list(names) for key, names in data.get("rosters", {}).items()},
            players={
                name: PlayerSeason.from_dict(raw)
                for name, raw in data.get("players", {}).items()
            },
            frames=[MatchFrames.from_dict(m) for m in data.get("frames", [])],
            league_id=data.get("league_id", ""),
        )
