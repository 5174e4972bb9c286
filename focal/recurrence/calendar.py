"""Time-zone aware calendar arithmetic for the occurrence engine.

Every engine call receives a ``CalendarContext`` explicitly so results never depend on the
host's locale or default time zone.

Datetime handling:
- Naive datetimes are wall-clock times in the context's zone.
- Aware datetimes are converted into the context's zone before taking the calendar day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from focal.models.constants import DEFAULT_TIME_ZONE

DayLike = Union[date, datetime]


@dataclass(frozen=True)
class CalendarContext:
    time_zone: ZoneInfo

    @classmethod
    def from_name(cls, name: str = DEFAULT_TIME_ZONE) -> "CalendarContext":
        """Build a context from an IANA zone name. Raises ValueError for unknown zones."""
        zone_name = (name or "").strip() or DEFAULT_TIME_ZONE
        try:
            return cls(time_zone=ZoneInfo(zone_name))
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            # Directory names such as "America" surface as IsADirectoryError.
            raise ValueError(f"Unknown time zone: {zone_name!r}") from e

    @property
    def name(self) -> str:
        return self.time_zone.key

    def local_day(self, value: DayLike) -> date:
        """Start-of-day: the calendar day ``value`` falls on in this zone."""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.date()
            return value.astimezone(self.time_zone).date()
        return value

    def add_days(self, day: DayLike, n: int) -> date:
        return self.local_day(day) + timedelta(days=n)

    def weekday_index(self, day: DayLike) -> int:
        """Weekday as 0=Sunday .. 6=Saturday."""
        # date.weekday() is Monday=0 .. Sunday=6
        return (self.local_day(day).weekday() + 1) % 7

    def day_of_month(self, day: DayLike) -> int:
        return self.local_day(day).day

    def month(self, day: DayLike) -> int:
        return self.local_day(day).month

    def weeks_between(self, start: DayLike, end: DayLike) -> int:
        """Whole weeks from ``start``'s day to ``end``'s day (negative if end is earlier).

        Counted on calendar days, so the time of day and year boundaries do not matter.
        """
        days = (self.local_day(end) - self.local_day(start)).days
        if days >= 0:
            return days // 7
        return -((-days) // 7)

    def is_same_day(self, a: DayLike, b: DayLike) -> bool:
        return self.local_day(a) == self.local_day(b)

    def days_in_range(self, start: DayLike, end: DayLike) -> Iterator[date]:
        """Every calendar day from ``start`` through ``end`` inclusive."""
        cur = self.local_day(start)
        last = self.local_day(end)
        while cur <= last:
            yield cur
            cur = cur + timedelta(days=1)

    def at_time_of(self, day: DayLike, reference: datetime) -> datetime:
        """``day`` at ``reference``'s hour and minute.

        The wall-clock time is kept across DST transitions. The result is aware (in this zone)
        when ``reference`` is aware, naive otherwise. A time that falls in a spring-forward gap
        is moved forward by the gap (02:30 becomes 03:30).
        """
        d = self.local_day(day)
        if reference.tzinfo is None:
            return datetime.combine(d, time(reference.hour, reference.minute))
        local_ref = reference.astimezone(self.time_zone)
        wall = datetime.combine(d, time(local_ref.hour, local_ref.minute), tzinfo=self.time_zone)
        return wall.astimezone(timezone.utc).astimezone(self.time_zone)

    def add_duration(self, start: datetime, duration: timedelta) -> datetime:
        """``start`` plus an absolute elapsed time."""
        if start.tzinfo is None:
            return start + duration
        # Aware arithmetic in Python is wall-clock; go through UTC for elapsed time.
        return (start.astimezone(timezone.utc) + duration).astimezone(self.time_zone)
