"""Data models for Focal."""

from focal.models.task import TaskTemplate
from focal.models.completion import CompletionRecord
from focal.models.occurrence import Occurrence
from focal.models.subtask import Subtask
from focal.models.recurrence import (
    RecurrenceRule,
    NoRecurrence,
    DailyRule,
    WeeklyRule,
    BiweeklyRule,
    MonthlyRule,
    YearlyRule,
    CustomRule,
    parse_recurrence,
)

__all__ = [
    "TaskTemplate",
    "CompletionRecord",
    "Occurrence",
    "Subtask",
    "RecurrenceRule",
    "NoRecurrence",
    "DailyRule",
    "WeeklyRule",
    "BiweeklyRule",
    "MonthlyRule",
    "YearlyRule",
    "CustomRule",
    "parse_recurrence",
]
