"""Player and team analytics built from frame-level records."""

from .form import PlayerForm, player_form
from .head_to_head import analyze_head_to_head, head_to_head, squad_head_to_head
from .rankings import power_rankings, schedule_strength
from .scouting import predict_lineup, scouting_report
from .splits import break_and_dish_stats, player_home_away, set_performance, team_home_away

__all__ = [
    "PlayerForm",
    "analyze_head_to_head",
    "break_and_dish_stats",
    "head_to_head",
    "player_form",
    "player_home_away",
    "power_rankings",
    "predict_lineup",
    "schedule_strength",
    "scouting_report",
    "set_performance",
    "squad_head_to_head",
    "team_home_away",
]
