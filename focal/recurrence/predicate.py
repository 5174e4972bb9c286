"""Occurrence predicate: does a template's rule place an occurrence on a given day?"""

from __future__ import annotations

from focal.models.recurrence import (
    BiweeklyRule,
    CustomRule,
    DailyRule,
    MonthlyRule,
    WeeklyRule,
    YearlyRule,
)
from focal.models.task import TaskTemplate
from focal.recurrence.calendar import CalendarContext, DayLike


def is_recurring(template: TaskTemplate) -> bool:
    return template.recurrence.is_recurring


def occurs(template: TaskTemplate, day: DayLike, calendar: CalendarContext) -> bool:
    """Return True if ``template`` has an occurrence on ``day``.

    Comparison is at day granularity: the anchor's own day counts when the rule matches it.
    Months (or years) without the anchor's day-of-month are skipped, never clamped.
    """
    rule = template.recurrence
    if not rule.is_recurring:
        return False

    candidate = calendar.local_day(day)
    anchor = calendar.local_day(template.anchor_start)
    if candidate < anchor:
        return False

    if isinstance(rule, DailyRule):
        return True

    if isinstance(rule, WeeklyRule):
        return calendar.weekday_index(candidate) == calendar.weekday_index(anchor)

    if isinstance(rule, BiweeklyRule):
        if calendar.weekday_index(candidate) != calendar.weekday_index(anchor):
            return False
        return calendar.weeks_between(anchor, candidate) % 2 == 0

    if isinstance(rule, MonthlyRule):
        return calendar.day_of_month(candidate) == calendar.day_of_month(anchor)

    if isinstance(rule, YearlyRule):
        return (calendar.month(candidate), calendar.day_of_month(candidate)) == (
            calendar.month(anchor),
            calendar.day_of_month(anchor),
        )

    if isinstance(rule, CustomRule):
        return calendar.weekday_index(candidate) in rule.weekdays

    return False
