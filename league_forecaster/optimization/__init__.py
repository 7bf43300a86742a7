"""Lineup optimization."""

from .lineup import LineupConfig, LineupOptimizer, LockedPosition, OptimizedLineup

__all__ = ["LineupConfig", "LineupOptimizer", "LockedPosition", "OptimizedLineup"]
