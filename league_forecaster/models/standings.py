"""League table aggregation."""

from dataclasses import dataclass
from typing import List, Tuple

import pandas as pd

from .league import LeagueSnapshot

HOME_WIN_POINTS = 2
AWAY_WIN_POINTS = 3
DRAW_POINTS = 1

_COLUMNS = ["team", "played", "won", "drawn", "lost", "frames_for", "frames_against", "points"]


@dataclass
class StandingEntry:
    """One row of a division table."""

    team: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    frames_for: int = 0
    frames_against: int = 0
    points: int = 0

    @property
    def diff(self) -> int:
        return self.frames_for - self.frames_against

    def to_dict(self) -> dict:
        return {
            "team": self.team,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "frames_for": self.frames_for,
            "frames_against": self.frames_against,
            "points": self.points,
            "diff": self.diff,
        }


def match_points(home_score: int, away_score: int) -> Tuple[int, int]:
    """
    League points for a result.

    Away wins are worth more than home wins; a draw is a point each.

    Returns:
        (home_points, away_points)
    """
    if home_score > away_score:
        return HOME_WIN_POINTS, 0
    if home_score < away_score:
        return 0, AWAY_WIN_POINTS
    return DRAW_POINTS, DRAW_POINTS


def _team_rows(team: str, own: int, other: int, points: int) -> dict:
    return {
        "team": team,
        "played": 1,
        "won": int(own > other),
        "drawn": int(own == other),
        "lost": int(own < other),
        "frames_for": own,
        "frames_against": other,
        "points": points,
    }


def calc_standings(snapshot: LeagueSnapshot, division: str) -> List[StandingEntry]:
    """
    Build the table for a division from its results.

    Args:
        snapshot: League data
        division: Division code

    Returns:
        Entries sorted by points, then frame difference (both descending).
        Empty when the division is unknown.
    """
    teams = snapshot.division_teams(division)
    if not teams:
        return []

    members = set(teams)
    rows = []
    for result in snapshot.results:
        if snapshot.division_of(result.home) != division:
            continue
        if result.home not in members or result.away not in members:
            continue
        home_pts, away_pts = match_points(result.home_score, result.away_score)
        rows.append(_team_rows(result.home, result.home_score, result.away_score, home_pts))
        rows.append(_team_rows(result.away, result.away_score, result.home_score, away_pts))

    frame = pd.DataFrame(rows, columns=_COLUMNS)
    totals = (
        frame.groupby("team", sort=False)[_COLUMNS[1:]]
        .sum()
        .reindex(teams, fill_value=0)
    )
    totals["diff"] = totals["frames_for"] - totals["frames_against"]
    totals = totals.sort_values(["points", "diff"], ascending=False, kind="mergesort")

    return [
        StandingEntry(
            team=team,
            played=int(row["played"]),
            won=int(row["won"]),
            drawn=int(row["drawn"]),
            lost=int(row["lost"]),
            frames_for=int(row["frames_for"]),
            frames_against=int(row["frames_against"]),
            points=int(row["points"]),
        )
        for team, row in totals.iterrows()
    ]


def standings_frame(entries: List[StandingEntry]) -> pd.DataFrame:
    """Tabular view of a standings list, indexed by position (1-based)."""
    frame = pd.DataFrame([e.to_dict() for e in entries])
    frame.index = range(1, len(frame) + 1)
    return frame
