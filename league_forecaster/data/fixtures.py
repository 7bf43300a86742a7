"""Fixture and result lookups over a league snapshot."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ..models.league import LeagueSnapshot
from ..models.match import Fixture, MatchResult, most_recent_first


def latest_result_date(results: Iterable[MatchResult]) -> Optional[date]:
    """Most recent result date, or None when there are no results."""
    dates = [r.sort_date for r in results]
    return max(dates) if dates else None


def remaining_fixtures(snapshot: LeagueSnapshot, division: str) -> List[Fixture]:
    """
    Fixtures in ``division`` dated strictly after its latest result.

    The cut-off is taken from results in the same division. When the division
    has no results yet every fixture counts as remaining.
    """
    cutoff = latest_result_date(r for r in snapshot.results if r.division == division)
    return [
        f for f in snapshot.fixtures
        if f.division == division and (cutoff is None or f.sort_date > cutoff)
    ]


@dataclass(frozen=True)
class TeamResult:
    """A match result seen from one team's side."""

    result: MatchResult
    team: str

    @property
    def date(self) -> str:
        return self.result.date

    @property
    def is_home(self) -> bool:
        return self.result.home == self.team

    @property
    def opponent(self) -> str:
        return self.result.away if self.is_home else self.result.home

    @property
    def team_score(self) -> int:
        return self.result.score_for(self.team)

    @property
    def opponent_score(self) -> int:
        return self.result.score_against(self.team)

    @property
    def outcome(self) -> str:
        return self.result.outcome_for(self.team)


def team_results(team: str, results: Iterable[MatchResult]) -> List[TeamResult]:
    """Every result involving ``team``, most recent first."""
    own = [r for r in results if r.home == team or r.away == team]
    return [TeamResult(result=r, team=team) for r in most_recent_first(own)]
