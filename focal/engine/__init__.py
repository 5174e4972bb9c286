"""Planner engine for Focal."""

from focal.engine.planner import (
    instances_for_date,
    instances_for_week,
    start_of_week,
    completion_progress,
)

__all__ = [
    "instances_for_date",
    "instances_for_week",
    "start_of_week",
    "completion_progress",
]
