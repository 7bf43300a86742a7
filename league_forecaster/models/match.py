"""Match, fixture and frame-level records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List

FRAMES_PER_MATCH = 10
FRAMES_PER_SET = 5

DATE_FORMAT = "%d-%m-%Y"


class InvalidRecordError(ValueError):
    """Raised when a source record cannot be constructed from its raw fields."""


def parse_match_date(raw: str) -> date:
    """
    Parse a league date string.

    Args:
        raw: Date in DD-MM-YYYY form (e.g. "07-11-2025")

    Returns:
        Sortable date object
    """
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as exc:
        raise InvalidRecordError(f"Unsupported date format: {raw!r}") from exc


@dataclass(frozen=True)
class MatchResult:
    """A completed fixture. Corrections replace the record wholesale."""

    date: str
    home: str
    away: str
    home_score: int
    away_score: int
    division: str
    frames: int = FRAMES_PER_MATCH

    def __post_init__(self):
        if self.home_score < 0 or self.away_score < 0:
            raise InvalidRecordError(
                f"Negative score in {self.home} v {self.away}: {self.home_score}-{self.away_score}"
            )
        parse_match_date(self.date)

    @property
    def sort_date(self) -> date:
        return parse_match_date(self.date)

    def score_for(self, team: str) -> int:
        return self.home_score if team == self.home else self.away_score

    def score_against(self, team: str) -> int:
        return self.away_score if team == self.home else self.home_score

    def outcome_for(self, team: str) -> str:
        """'W', 'D' or 'L' from the perspective of ``team``."""
        own = self.score_for(team)
        other = self.score_against(team)
        if own > other:
            return "W"
        if own < other:
            return "L"
        return "D"

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "home": self.home,
            "away": self.away,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "division": self.division,
            "frames": self.frames,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MatchResult":
        return cls(
            date=data["date"],
            home=data["home"],
            away=data["away"],
            home_score=int(data["home_score"]),
            away_score=int(data["away_score"]),
            division=data.get("division", ""),
            frames=int(data.get("frames", FRAMES_PER_MATCH)),
        )


@dataclass(frozen=True)
class Fixture:
    """A scheduled match that has not been played yet."""

    date: str
    home: str
    away: str
    division: str

    def __post_init__(self):
        parse_match_date(self.date)

    @property
    def sort_date(self) -> date:
        return parse_match_date(self.date)

    def to_dict(self) -> dict:
        return {"date": self.date, "home": self.home, "away": self.away, "division": self.division}

    @classmethod
    def from_dict(cls, data: dict) -> "Fixture":
        return cls(
            date=data["date"],
            home=data["home"],
            away=data["away"],
            division=data.get("division", ""),
        )


@dataclass(frozen=True)
class WhatIfResult:
    """A hypothetical result spliced into the standings before simulating."""

    home: str
    away: str
    home_score: int
    away_score: int

    @property
    def key(self) -> str:
        return f"{self.home}:{self.away}"

    @classmethod
    def from_dict(cls, data: dict) -> "WhatIfResult":
        return cls(
            home=data["home"],
            away=data["away"],
            home_score=int(data["home_score"]),
            away_score=int(data["away_score"]),
        )


@dataclass(frozen=True)
class FrameOutcome:
    """A single frame within a match."""

    frame_num: int
    home_player: str
    away_player: str
    winner: str  # "home" or "away"
    break_and_dish: bool = False
    forfeit: bool = False

    def __post_init__(self):
        if self.winner not in ("home", "away"):
            raise InvalidRecordError(f"Frame winner must be 'home' or 'away', got {self.winner!r}")

    @property
    def set_number(self) -> int:
        return 1 if self.frame_num <= FRAMES_PER_SET else 2

    def player_won(self, player: str) -> bool:
        if self.home_player == player:
            return self.winner == "home"
        return self.away_player == player and self.winner == "away"

    def to_dict(self) -> dict:
        return {
            "frame_num": self.frame_num,
            "home_player": self.home_player,
            "away_player": self.away_player,
            "winner": self.winner,
            "break_and_dish": self.break_and_dish,
            "forfeit": self.forfeit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FrameOutcome":
        return cls(
            frame_num=int(data["frame_num"]),
            home_player=data["home_player"],
            away_player=data["away_player"],
            winner=data["winner"],
            break_and_dish=bool(data.get("break_and_dish", False)),
            forfeit=bool(data.get("forfeit", False)),
        )


@dataclass(frozen=True)
class MatchFrames:
    """A completed match decomposed into its individual frames."""

    match_id: str
    date: str
    home: str
    away: str
    division: str
    frames: List[FrameOutcome] = field(default_factory=list)

    def __post_init__(self):
        parse_match_date(self.date)

    @property
    def sort_date(self) -> date:
        return parse_match_date(self.date)

    def involves(self, team: str) -> bool:
        return self.home == team or self.away == team

    def players_for(self, team: str) -> List[str]:
        """Players who appeared for ``team`` in frame order."""
        if team == self.home:
            return [f.home_player for f in self.frames]
        if team == self.away:
            return [f.away_player for f in self.frames]
        return []

    def to_dict(self) -> dict:
        return {
            "match_id": self.match_id,
            "date": self.date,
            "home": self.home,
            "away": self.away,
            "division": self.division,
            "frames": [f.to_dict() for f in self.frames],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MatchFrames":
        return cls(
            match_id=str(data["match_id"]),
            date=data["date"],
            home=data["home"],
            away=data["away"],
            division=data.get("division", ""),
            frames=[FrameOutcome.from_dict(f) for f in data.get("frames", [])],
        )


def most_recent_first(records):
    """Sort dated records newest first, keeping input order for ties."""
    return sorted(records, key=lambda r: r.sort_date, reverse=True)
