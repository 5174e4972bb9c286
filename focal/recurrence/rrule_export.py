"""Export recurrence rules to iCalendar RRULE strings (export-only)."""

from __future__ import annotations

from datetime import date
from typing import List

from focal.models.recurrence import (
    BiweeklyRule,
    CustomRule,
    DailyRule,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)

# Indexed 0=Sunday .. 6=Saturday
_WD_CODES: List[str] = ["SU", "MO", "TU", "WE", "TH", "FR", "SA"]


def rule_to_rrule(rule: RecurrenceRule, anchor_day: date) -> str:
    """Convert a rule to an RRULE (without the leading 'RRULE:' prefix).

    Month-day rules rely on RFC 5545 skipping invalid dates (e.g. the 31st in April),
    which matches the engine's skip behavior.
    """
    anchor_wd = _WD_CODES[(anchor_day.weekday() + 1) % 7]

    if isinstance(rule, DailyRule):
        return "FREQ=DAILY"
    if isinstance(rule, WeeklyRule):
        return f"FREQ=WEEKLY;BYDAY={anchor_wd}"
    if isinstance(rule, BiweeklyRule):
        return f"FREQ=WEEKLY;INTERVAL=2;BYDAY={anchor_wd}"
    if isinstance(rule, MonthlyRule):
        return f"FREQ=MONTHLY;BYMONTHDAY={anchor_day.day}"
    if isinstance(rule, YearlyRule):
        return f"FREQ=YEARLY;BYMONTH={anchor_day.month};BYMONTHDAY={anchor_day.day}"
    if isinstance(rule, CustomRule):
        if not rule.weekdays:
            raise ValueError("custom rule without weekdays has no RRULE form")
        return "FREQ=WEEKLY;BYDAY=" + ",".join(_WD_CODES[d] for d in sorted(rule.weekdays))
    raise ValueError("non-recurring rule has no RRULE form")
