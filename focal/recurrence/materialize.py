"""Materialize recurring task templates into Occurrence values for display.

Nothing here is persisted: occurrences are rebuilt on every call and virtual instance ids
are fresh each time.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional

from focal.models.constants import NEXT_OCCURRENCE_SEARCH_DAYS
from focal.models.occurrence import Occurrence
from focal.models.task import TaskTemplate
from focal.recurrence.calendar import CalendarContext, DayLike
from focal.recurrence.completions import CompletionLookup, CompletionSource, as_completion_lookup
from focal.recurrence.predicate import occurs

logger = logging.getLogger(__name__)


def _virtual_instance(
    template: TaskTemplate,
    day: date,
    lookup: CompletionLookup,
    calendar: CalendarContext,
) -> Occurrence:
    record = lookup.find(template.id, day)
    start_time = calendar.at_time_of(day, template.anchor_start)
    return Occurrence(
        id=str(uuid.uuid4()),
        source_template_id=template.id,
        title=template.title,
        occurrence_date=day,
        start_time=start_time,
        end_time=calendar.add_duration(start_time, template.duration),
        is_virtual=True,
        is_completed=record is not None,
        completed_at=record.completed_at if record is not None else None,
        subtasks=list(template.subtasks),
        completed_subtasks_count=template.completed_subtasks_count,
        subtasks_progress=template.subtasks_progress,
    )


def single_instance(template: TaskTemplate, calendar: CalendarContext) -> Occurrence:
    """The canonical (non-virtual) instance of a template; completion comes from the template."""
    return Occurrence(
        id=template.id,
        source_template_id=template.id,
        title=template.title,
        occurrence_date=calendar.local_day(template.anchor_start),
        start_time=template.anchor_start,
        end_time=calendar.add_duration(template.anchor_start, template.duration),
        is_virtual=False,
        is_completed=template.is_completed,
        completed_at=template.completed_at,
        subtasks=list(template.subtasks),
        completed_subtasks_count=template.completed_subtasks_count,
        subtasks_progress=template.subtasks_progress,
    )


def generate_occurrences(
    template: TaskTemplate,
    start: DayLike,
    end: DayLike,
    completions: CompletionSource,
    calendar: CalendarContext,
) -> List[Occurrence]:
    """All occurrences of ``template`` from ``start``'s day through ``end``'s day inclusive.

    Returns an empty list for non-recurring templates; those go through ``single_instance``.
    Results are in ascending date order.
    """
    if not template.is_recurring:
        return []

    lookup = as_completion_lookup(completions)
    effective_start = max(calendar.local_day(template.anchor_start), calendar.local_day(start))

    instances: List[Occurrence] = []
    for day in calendar.days_in_range(effective_start, end):
        if occurs(template, day, calendar):
            instances.append(_virtual_instance(template, day, lookup, calendar))

    logger.debug(
        f"Materialized {len(instances)} occurrences for template {template.id} "
        f"({effective_start.isoformat()}..{calendar.local_day(end).isoformat()})"
    )
    return instances


def generate_occurrence_for_date(
    template: TaskTemplate,
    day: DayLike,
    completions: CompletionSource,
    calendar: CalendarContext,
) -> Optional[Occurrence]:
    """The occurrence of ``template`` on ``day``, or None if the rule does not place one there."""
    if not occurs(template, day, calendar):
        return None
    return _virtual_instance(template, calendar.local_day(day), as_completion_lookup(completions), calendar)


def next_occurrence(
    template: TaskTemplate,
    after: DayLike,
    calendar: CalendarContext,
    search_days: int = NEXT_OCCURRENCE_SEARCH_DAYS,
) -> Optional[date]:
    """First day strictly after ``after`` on which the template occurs.

    Checks at most ``search_days`` days and returns None when nothing matches in that horizon.
    """
    if not template.is_recurring:
        return None

    day = calendar.local_day(after)
    for _ in range(search_days):
        day = calendar.add_days(day, 1)
        if occurs(template, day, calendar):
            return day
    return None
