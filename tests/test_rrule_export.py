"""Tests for RRULE export."""

import pytest
from datetime import date

from focal.models.recurrence import (
    BiweeklyRule,
    CustomRule,
    DailyRule,
    MonthlyRule,
    NoRecurrence,
    WeeklyRule,
    YearlyRule,
)
from focal.recurrence.rrule_export import rule_to_rrule


ANCHOR = date(2024, 1, 31)  # Wednesday


@pytest.mark.parametrize(
    "rule, expected",
    [
        (DailyRule(), "FREQ=DAILY"),
        (WeeklyRule(), "FREQ=WEEKLY;BYDAY=WE"),
        (BiweeklyRule(), "FREQ=WEEKLY;INTERVAL=2;BYDAY=WE"),
        (MonthlyRule(), "FREQ=MONTHLY;BYMONTHDAY=31"),
        (YearlyRule(), "FREQ=YEARLY;BYMONTH=1;BYMONTHDAY=31"),
        (CustomRule(weekdays={5, 1, 0}), "FREQ=WEEKLY;BYDAY=SU,MO,FR"),
    ],
    ids=lambda v: getattr(v, "kind", None),
)
def test_rule_to_rrule(rule, expected):
    assert rule_to_rrule(rule, ANCHOR) == expected


def test_sunday_anchor():
    assert rule_to_rrule(WeeklyRule(), date(2024, 1, 7)) == "FREQ=WEEKLY;BYDAY=SU"


def test_non_recurring_has_no_rrule():
    with pytest.raises(ValueError):
        rule_to_rrule(NoRecurrence(), ANCHOR)


def test_empty_custom_has_no_rrule():
    with pytest.raises(ValueError):
        rule_to_rrule(CustomRule(weekdays=set()), ANCHOR)
