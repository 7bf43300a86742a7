"""
Power rankings and strength of schedule.

Power rankings blend five components into one score, independent of the
points table:

    0.30 * points (normalised to the division leader)
  + 0.25 * form (last five results, recency weighted)
  + 0.20 * margin of victory
  + 0.15 * strength of schedule
  + 0.10 * trajectory (recent win rate against season win rate)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from ..data.fixtures import remaining_fixtures, team_results
from ..models.league import LeagueSnapshot
from ..models.standings import calc_standings
from ..predictors.strength import StrengthEstimator

POINTS_WEIGHT = 0.30
FORM_WEIGHT = 0.25
MARGIN_WEIGHT = 0.20
SCHEDULE_WEIGHT = 0.15
TRAJECTORY_WEIGHT = 0.10

DRAW_FORM_VALUE = 0.4
FORM_MATCHES = 5


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass
class PowerRanking:
    team: str
    rank: int
    previous_rank: Optional[int]
    score: float
    components: Dict[str, float]


@dataclass
class ScheduleStrength:
    team: str
    completed: float
    remaining: float
    combined: float
    rank: int = 0


def power_rankings(
    snapshot: LeagueSnapshot,
    division: str,
    previous: Optional[List[PowerRanking]] = None,
    estimator: Optional[StrengthEstimator] = None,
) -> List[PowerRanking]:
    """
    Rank a division's teams on the composite power score.

    Args:
        snapshot: League data
        division: Division code
        previous: Last published rankings, carried through as ``previous_rank``
        estimator: Strength estimator for the schedule component

    Returns:
        Rankings, best first; empty for an unknown division
    """
    standings = calc_standings(snapshot, division)
    if not standings:
        return []
    strengths = (estimator or StrengthEstimator()).team_strengths(snapshot, division)
    max_points = max(max(s.points for s in standings), 1)
    previous_ranks = {p.team: p.rank for p in previous or []}

    rows = []
    for entry in standings:
        results = team_results(entry.team, snapshot.results)
        played = len(results)
        last = results[:FORM_MATCHES]

        weights = [FORM_MATCHES - i for i in range(len(last))]
        values = [1.0 if r.outcome == "W" else DRAW_FORM_VALUE if r.outcome == "D" else 0.0 for r in last]
        form = sum(w * v for w, v in zip(weights, values)) / sum(weights) if weights else 0.5

        avg_diff = sum(r.team_score - r.opponent_score for r in results) / played if played else 0.0
        margin = _clamp((avg_diff + 10) / 20)

        faced = [strengths[r.opponent] for r in results if r.opponent in strengths]
        avg_opponent = sum(faced) / len(faced) if faced else 0.0
        schedule = _clamp((avg_opponent + 1) / 2)

        season_rate = sum(r.outcome == "W" for r in results) / played if played else 0.5
        recent_rate = sum(r.outcome == "W" for r in last) / len(last) if last else 0.5
        trajectory = _clamp((recent_rate - season_rate + 1) / 2)

        rows.append({
            "team": entry.team,
            "points": entry.points / max_points,
            "form": form,
            "mov": margin,
            "sos": schedule,
            "trajectory": trajectory,
        })

    frame = pd.DataFrame(rows)
    frame["score"] = (
        POINTS_WEIGHT * frame["points"]
        + FORM_WEIGHT * frame["form"]
        + MARGIN_WEIGHT * frame["mov"]
        + SCHEDULE_WEIGHT * frame["sos"]
        + TRAJECTORY_WEIGHT * frame["trajectory"]
    )
    frame = frame.sort_values("score", ascending=False, kind="mergesort").reset_index(drop=True)

    return [
        PowerRanking(
            team=row["team"],
            rank=i + 1,
            previous_rank=previous_ranks.get(row["team"]),
            score=float(row["score"]),
            components={k: float(row[k]) for k in ("points", "form", "mov", "sos", "trajectory")},
        )
        for i, row in frame.iterrows()
    ]


def schedule_strength(
    snapshot: LeagueSnapshot,
    team: str,
    division: str,
    strengths: Optional[Dict[str, float]] = None,
) -> ScheduleStrength:
    """Average opponent strength over completed, remaining and all fixtures."""
    if strengths is None:
        strengths = StrengthEstimator().team_strengths(snapshot, division)

    completed = [strengths[r.opponent] for r in team_results(team, snapshot.results) if r.opponent in strengths]
    upcoming = []
    for fixture in remaining_fixtures(snapshot, division):
        if team not in (fixture.home, fixture.away):
            continue
        opponent = fixture.away if fixture.home == team else fixture.home
        if opponent in strengths:
            upcoming.append(strengths[opponent])

    total = len(completed) + len(upcoming)
    return ScheduleStrength(
        team=team,
        completed=sum(completed) / len(completed) if completed else 0.0,
        remaining=sum(upcoming) / len(upcoming) if upcoming else 0.0,
        combined=(sum(completed) + sum(upcoming)) / total if total else 0.0,
    )


def all_schedule_strength(snapshot: LeagueSnapshot, division: str) -> List[ScheduleStrength]:
    """Schedule strength for every team, ranked hardest remaining run first."""
    strengths = StrengthEstimator().team_strengths(snapshot, division)
    entries = [
        schedule_strength(snapshot, team, division, strengths)
        for team in snapshot.division_teams(division)
    ]
    entries.sort(key=lambda e: e.remaining, reverse=True)
    for i, entry in enumerate(entries):
        entry.rank = i + 1
    return entries
