"""Tests for occurrence materialization."""

import pytest
from datetime import date, datetime, timedelta, timezone

from focal.models.completion import CompletionRecord
from focal.models.subtask import Subtask
from focal.models.recurrence import (
    CustomRule,
    DailyRule,
    MonthlyRule,
    NoRecurrence,
    WeeklyRule,
    YearlyRule,
)
from focal.recurrence.completions import IndexedCompletionLookup
from focal.recurrence.materialize import (
    generate_occurrence_for_date,
    generate_occurrences,
    next_occurrence,
    single_instance,
)


class TestGenerateOccurrences:
    def test_daily_ten_day_range_ascending(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 10), [], utc_calendar)

        assert len(instances) == 10
        dates = [i.occurrence_date for i in instances]
        assert dates == sorted(dates)
        assert len(set(dates)) == 10
        assert all(i.is_virtual for i in instances)
        assert all(i.source_template_id == template.id for i in instances)

    def test_range_before_anchor_is_clipped(self, make_template, utc_calendar):
        template = make_template(DailyRule(), anchor_start=datetime(2024, 1, 5, 9, 0))
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 7), None, utc_calendar)
        assert [i.occurrence_date for i in instances] == [date(2024, 1, 5), date(2024, 1, 6), date(2024, 1, 7)]

    def test_datetime_bounds_use_calendar_day(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        instances = generate_occurrences(
            template, datetime(2024, 1, 2, 18, 0), datetime(2024, 1, 4, 1, 0), None, utc_calendar
        )
        assert [i.occurrence_date for i in instances] == [date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4)]

    def test_end_before_start_is_empty(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        assert generate_occurrences(template, date(2024, 2, 1), date(2024, 1, 1), None, utc_calendar) == []

    def test_non_recurring_is_empty(self, make_template, utc_calendar):
        template = make_template(NoRecurrence())
        assert generate_occurrences(template, date(2023, 1, 1), date(2025, 1, 1), None, utc_calendar) == []

    def test_monthly_thirty_first_skips_april(self, make_template, utc_calendar):
        template = make_template(MonthlyRule(), anchor_start=datetime(2024, 1, 31, 9, 0))
        assert generate_occurrences(template, date(2024, 4, 1), date(2024, 4, 30), None, utc_calendar) == []

    def test_monthly_thirty_first_over_half_year(self, make_template, utc_calendar):
        template = make_template(MonthlyRule(), anchor_start=datetime(2024, 1, 31, 9, 0))
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 6, 30), None, utc_calendar)
        assert [i.occurrence_date for i in instances] == [
            date(2024, 1, 31),
            date(2024, 3, 31),
            date(2024, 5, 31),
        ]

    def test_custom_week(self, make_template, utc_calendar):
        template = make_template(CustomRule(weekdays={1, 3, 5}))
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 14), None, utc_calendar)
        assert [i.occurrence_date.isoformat() for i in instances] == [
            "2024-01-01", "2024-01-03", "2024-01-05",
            "2024-01-08", "2024-01-10", "2024-01-12",
        ]

    def test_fresh_ids_per_materialization(self, make_template, utc_calendar):
        template = make_template(WeeklyRule())
        first = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 1), None, utc_calendar)
        second = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 1), None, utc_calendar)
        assert first[0].id != second[0].id
        assert first[0].id != template.id

    def test_completion_join(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        done_at = datetime(2024, 1, 2, 10, 15)
        records = [
            CompletionRecord(template_id=template.id, occurrence_date=date(2024, 1, 2), completed_at=done_at),
            CompletionRecord(template_id="someone-else", occurrence_date=date(2024, 1, 3)),
        ]
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 3), records, utc_calendar)

        assert [i.is_completed for i in instances] == [False, True, False]
        assert instances[1].completed_at == done_at
        assert instances[0].completed_at is None

    def test_accepts_completion_lookup(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        lookup = IndexedCompletionLookup(
            [CompletionRecord(template_id=template.id, occurrence_date=date(2024, 1, 1))]
        )
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 2), lookup, utc_calendar)
        assert [i.is_completed for i in instances] == [True, False]

    def test_does_not_mutate_inputs(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        records = [CompletionRecord(template_id=template.id, occurrence_date=date(2024, 1, 1))]
        before_template = template.model_dump()
        before_records = [r.model_dump() for r in records]

        generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 31), records, utc_calendar)

        assert template.model_dump() == before_template
        assert [r.model_dump() for r in records] == before_records


class TestOccurrenceTimes:
    def test_start_and_end_from_anchor_time(self, make_template, utc_calendar):
        template = make_template(WeeklyRule(), duration=timedelta(minutes=45))
        [instance] = generate_occurrences(template, date(2024, 1, 8), date(2024, 1, 8), None, utc_calendar)
        assert instance.start_time == datetime(2024, 1, 8, 9, 0)
        assert instance.end_time == datetime(2024, 1, 8, 9, 45)

    def test_start_time_keeps_wall_clock_across_dst(self, make_template, ny_calendar):
        anchor = datetime(2024, 3, 8, 9, 0, tzinfo=ny_calendar.time_zone)
        template = make_template(DailyRule(), anchor_start=anchor, duration=timedelta(hours=1))

        instance = generate_occurrence_for_date(template, date(2024, 3, 11), None, ny_calendar)

        assert (instance.start_time.hour, instance.start_time.minute) == (9, 0)
        assert instance.start_time.astimezone(timezone.utc) == datetime(2024, 3, 11, 13, 0, tzinfo=timezone.utc)
        assert instance.end_time.astimezone(timezone.utc) == datetime(2024, 3, 11, 14, 0, tzinfo=timezone.utc)


class TestGenerateOccurrenceForDate:
    def test_none_when_rule_does_not_match(self, make_template, utc_calendar):
        template = make_template(WeeklyRule())
        assert generate_occurrence_for_date(template, date(2024, 1, 2), None, utc_calendar) is None

    def test_none_for_non_recurring(self, make_template, utc_calendar):
        template = make_template(NoRecurrence())
        assert generate_occurrence_for_date(template, date(2024, 1, 1), None, utc_calendar) is None

    def test_completion_join_is_repeatable(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        day = date(2024, 1, 4)
        done_at = datetime(2024, 1, 4, 20, 0)
        records = [CompletionRecord(template_id=template.id, occurrence_date=day, completed_at=done_at)]

        first = generate_occurrence_for_date(template, day, records, utc_calendar)
        second = generate_occurrence_for_date(template, day, records, utc_calendar)

        assert (first.is_completed, first.completed_at) == (True, done_at)
        assert (second.is_completed, second.completed_at) == (first.is_completed, first.completed_at)

    def test_duplicates_use_first_record(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        day = date(2024, 1, 4)
        records = [
            CompletionRecord(template_id=template.id, occurrence_date=day, completed_at=datetime(2024, 1, 4, 8, 0)),
            CompletionRecord(template_id=template.id, occurrence_date=day, completed_at=datetime(2024, 1, 4, 9, 0)),
        ]
        instance = generate_occurrence_for_date(template, day, records, utc_calendar)
        assert instance.is_completed is True
        assert instance.completed_at == datetime(2024, 1, 4, 8, 0)


class TestNextOccurrence:
    def test_next_weekly(self, make_template, utc_calendar):
        template = make_template(WeeklyRule())
        assert next_occurrence(template, date(2024, 1, 1), utc_calendar) == date(2024, 1, 8)

    def test_strictly_after(self, make_template, utc_calendar):
        template = make_template(DailyRule())
        assert next_occurrence(template, date(2024, 1, 3), utc_calendar) == date(2024, 1, 4)

    def test_before_anchor_returns_anchor(self, make_template, utc_calendar):
        template = make_template(DailyRule(), anchor_start=datetime(2024, 2, 10, 9, 0))
        assert next_occurrence(template, date(2024, 1, 1), utc_calendar) == date(2024, 2, 10)

    def test_non_recurring_is_none(self, make_template, utc_calendar):
        template = make_template(NoRecurrence())
        assert next_occurrence(template, date(2023, 12, 1), utc_calendar) is None

    def test_leap_day_bound(self, make_template, utc_calendar):
        """Nothing within 365 days after Feb 29 2024: the search stops instead of reaching 2028."""
        template = make_template(YearlyRule(), anchor_start=datetime(2024, 2, 29, 9, 0))
        assert next_occurrence(template, date(2024, 2, 29), utc_calendar) is None

    def test_empty_custom_is_none(self, make_template, utc_calendar):
        template = make_template(CustomRule(weekdays=set()))
        assert next_occurrence(template, date(2024, 1, 1), utc_calendar) is None

    def test_search_days_is_configurable(self, make_template, utc_calendar):
        template = make_template(MonthlyRule())
        assert next_occurrence(template, date(2024, 1, 1), utc_calendar, search_days=30) is None
        assert next_occurrence(template, date(2024, 1, 1), utc_calendar, search_days=31) == date(2024, 2, 1)


class TestSingleInstance:
    def test_pass_through(self, make_template, utc_calendar):
        template = make_template(NoRecurrence()).model_copy(
            update={"is_completed": True, "completed_at": datetime(2024, 1, 1, 10, 0)}
        )
        instance = single_instance(template, utc_calendar)

        assert instance.id == template.id
        assert instance.is_virtual is False
        assert instance.occurrence_date == date(2024, 1, 1)
        assert instance.start_time == template.anchor_start
        assert instance.end_time == template.end_time
        assert instance.is_completed is True
        assert instance.completed_at == datetime(2024, 1, 1, 10, 0)


class TestSubtasks:
    def test_progress_on_template(self, make_template):
        template = make_template(
            DailyRule(),
            subtasks=[Subtask(title="a", is_completed=True), Subtask(title="b"), Subtask(title="c")],
        )
        assert template.completed_subtasks_count == 1
        assert template.subtasks_progress == pytest.approx(1 / 3)

    def test_progress_without_subtasks(self, make_template):
        assert make_template(DailyRule()).subtasks_progress == 0.0

    def test_occurrences_share_template_subtasks(self, make_template, utc_calendar):
        template = make_template(DailyRule(), subtasks=[Subtask(title="a", is_completed=True), Subtask(title="b")])
        instances = generate_occurrences(template, date(2024, 1, 1), date(2024, 1, 3), None, utc_calendar)

        for instance in instances:
            assert [s.id for s in instance.subtasks] == [s.id for s in template.subtasks]
            assert instance.completed_subtasks_count == 1
            assert instance.subtasks_progress == 0.5

    def test_single_instance_carries_subtasks(self, make_template, utc_calendar):
        template = make_template(NoRecurrence(), subtasks=[Subtask(title="a")])
        instance = single_instance(template, utc_calendar)
        assert [s.title for s in instance.subtasks] == ["a"]
        assert instance.subtasks_progress == 0.0
