"""Recurrence rules for Focal.

A recurrence rule is a closed set of variants (a pydantic discriminated union on
``kind``). Legacy storage encodes the rule as a label string plus a weekday list;
``parse_recurrence`` is the only place that string is interpreted.
"""

from __future__ import annotations

import logging
from typing import Annotated, ClassVar, FrozenSet, Iterable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Weekday indices used by custom rules: 0=Sunday .. 6=Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

WEEKDAY_SHORT_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class _RuleBase(BaseModel):
    label: ClassVar[str] = ""

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def is_recurring(self) -> bool:
        return True


class NoRecurrence(_RuleBase):
    """A single, non-recurring event."""
    kind: Literal["none"] = "none"
    label: ClassVar[str] = "None"

    @property
    def is_recurring(self) -> bool:
        return False


class DailyRule(_RuleBase):
    kind: Literal["daily"] = "daily"
    label: ClassVar[str] = "Daily"


class WeeklyRule(_RuleBase):
    kind: Literal["weekly"] = "weekly"
    label: ClassVar[str] = "Weekly"


class BiweeklyRule(_RuleBase):
    kind: Literal["biweekly"] = "biweekly"
    label: ClassVar[str] = "Biweekly"


class MonthlyRule(_RuleBase):
    kind: Literal["monthly"] = "monthly"
    label: ClassVar[str] = "Monthly"


class YearlyRule(_RuleBase):
    kind: Literal["yearly"] = "yearly"
    label: ClassVar[str] = "Yearly"


class CustomRule(_RuleBase):
    """Occurs on a fixed set of weekdays (0=Sunday .. 6=Saturday)."""
    kind: Literal["custom"] = "custom"
    label: ClassVar[str] = "Custom"
    weekdays: FrozenSet[int] = Field(default_factory=frozenset, description="Weekday indices, 0=Sunday")

    @field_validator("weekdays")
    @classmethod
    def _validate_weekdays(cls, v):
        bad = sorted(d for d in v if d < SUNDAY or d > SATURDAY)
        if bad:
            raise ValueError(f"weekday indices must be within 0..6, got {bad}")
        return frozenset(v)


RecurrenceRule = Annotated[
    Union[NoRecurrence, DailyRule, WeeklyRule, BiweeklyRule, MonthlyRule, YearlyRule, CustomRule],
    Field(discriminator="kind"),
]

_SIMPLE_RULES = {
    "daily": DailyRule,
    "weekly": WeeklyRule,
    "biweekly": BiweeklyRule,
    "monthly": MonthlyRule,
    "yearly": YearlyRule,
}


def parse_recurrence(option: Optional[str], repeat_days: Optional[Iterable[int]] = None) -> RecurrenceRule:
    """Build a rule from the legacy (label, weekday list) pair.

    Unknown labels fall back to ``NoRecurrence``; callers that need to tell a
    malformed label from "no recurrence" must validate before calling.
    """
    key = (option or "").strip().lower()
    if not key or key == "none":
        return NoRecurrence()

    if key == "custom":
        days = []
        for d in repeat_days or []:
            try:
                idx = int(d)
            except (TypeError, ValueError):
                idx = -1
            if SUNDAY <= idx <= SATURDAY:
                days.append(idx)
            else:
                logger.warning(f"Dropping invalid custom weekday {d!r}")
        return CustomRule(weekdays=frozenset(days))

    rule_cls = _SIMPLE_RULES.get(key)
    if rule_cls is None:
        logger.warning(f"Unknown recurrence option {option!r}; treating as non-recurring")
        return NoRecurrence()
    return rule_cls()


def to_storage(rule: RecurrenceRule) -> Tuple[Optional[str], List[int]]:
    """Inverse of ``parse_recurrence``: (label or None, sorted weekday list)."""
    if not rule.is_recurring:
        return (None, [])
    if isinstance(rule, CustomRule):
        return (rule.label, sorted(rule.weekdays))
    return (rule.label, [])


def describe(rule: RecurrenceRule) -> str:
    """Short human-readable summary of a rule."""
    if isinstance(rule, NoRecurrence):
        return "Does not repeat"
    if isinstance(rule, DailyRule):
        return "Every day"
    if isinstance(rule, WeeklyRule):
        return "Every week"
    if isinstance(rule, BiweeklyRule):
        return "Every 2 weeks"
    if isinstance(rule, MonthlyRule):
        return "Every month"
    if isinstance(rule, YearlyRule):
        return "Every year"

    days = sorted(rule.weekdays)
    if not days:
        return "Never"
    if len(days) == 7:
        return "Every day"
    if days == [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY]:
        return "Weekdays"
    if days == [SUNDAY, SATURDAY]:
        return "Weekends"
    return ", ".join(WEEKDAY_SHORT_NAMES[d] for d in days)
