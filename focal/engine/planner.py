"""Planner views for Focal.

Combines recurring and one-off templates into the per-day and per-week instance lists the
timeline shows, plus completion progress.
"""

from datetime import date
from typing import List, Sequence

from focal.models.occurrence import Occurrence
from focal.models.recurrence import SUNDAY
from focal.models.task import TaskTemplate
from focal.recurrence.calendar import CalendarContext, DayLike
from focal.recurrence.completions import CompletionSource, as_completion_lookup
from focal.recurrence.materialize import generate_occurrence_for_date, single_instance


def instances_for_date(
    templates: Sequence[TaskTemplate],
    day: DayLike,
    completions: CompletionSource,
    calendar: CalendarContext,
) -> List[Occurrence]:
    """Every instance on ``day``, sorted by start time.

    Recurring templates contribute their occurrence on that day (if any); one-off templates
    contribute their single instance when their anchor falls on that day.

    Args:
        templates: Templates to expand
        day: Calendar day to show
        completions: Completion records (or a lookup) for recurring occurrences
        calendar: Calendar context used for day arithmetic

    Returns:
        Instances ordered by start_time
    """
    lookup = as_completion_lookup(completions)
    target = calendar.local_day(day)
    instances: List[Occurrence] = []

    for template in templates:
        if template.is_recurring:
            instance = generate_occurrence_for_date(template, target, lookup, calendar)
            if instance is not None:
                instances.append(instance)
        elif calendar.is_same_day(template.anchor_start, target):
            instances.append(single_instance(template, calendar))

    return sorted(instances, key=lambda i: _start_sort_key(i, calendar))


def _start_sort_key(instance: Occurrence, calendar: CalendarContext):
    """Sort key comparable across naive and aware start times."""
    start = instance.start_time
    if start.tzinfo is None:
        start = start.replace(tzinfo=calendar.time_zone)
    return start.timestamp()


def start_of_week(day: DayLike, calendar: CalendarContext, week_start: int = SUNDAY) -> date:
    """First day of the week containing ``day``; ``week_start`` uses 0=Sunday .. 6=Saturday."""
    offset = (calendar.weekday_index(day) - week_start) % 7
    return calendar.add_days(day, -offset)


def instances_for_week(
    templates: Sequence[TaskTemplate],
    day: DayLike,
    completions: CompletionSource,
    calendar: CalendarContext,
    week_start: int = SUNDAY,
) -> List[List[Occurrence]]:
    """Seven per-day instance lists for the week containing ``day``."""
    lookup = as_completion_lookup(completions)
    first = start_of_week(day, calendar, week_start)
    return [
        instances_for_date(templates, calendar.add_days(first, offset), lookup, calendar)
        for offset in range(7)
    ]


def completion_progress(instances: Sequence[Occurrence]) -> float:
    """Fraction of completed instances (0.0 when there are none)."""
    if not instances:
        return 0.0
    completed = sum(1 for i in instances if i.is_completed)
    return completed / len(instances)
