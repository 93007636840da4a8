"""
Unit tests for the aggregation engine.

All tests pin ``today`` so week boundaries are deterministic. The default
reference day is Wednesday 2024-06-12, whose week starts Monday 2024-06-10.

Usage:
    pytest tests/test_aggregation.py -v
"""
from datetime import date, timedelta

import pytest

from stepup_tracker.aggregation import (
    ActivitySnapshot,
    DayStatus,
    best_week,
    calendar_week_status,
    format_duration,
    load_snapshot,
    percentage_change,
    streak,
    total_duration_for_week,
    week_start,
    weekly_series,
    weekly_type_breakdown,
)
from stepup_tracker.models import WeeklyGoal, Workout

from conftest import make_workout


class TestWeekStart:

    def test_midweek(self):
        assert week_start(date(2024, 6, 12)) == date(2024, 6, 10)

    def test_monday_is_its_own_start(self):
        assert week_start(date(2024, 6, 10)) == date(2024, 6, 10)

    def test_sunday_maps_to_previous_monday(self):
        assert week_start(date(2024, 6, 16)) == date(2024, 6, 10)

    def test_crosses_month_boundary(self):
        assert week_start(date(2024, 7, 2)) == date(2024, 7, 1)
        assert week_start(date(2024, 6, 2)) == date(2024, 5, 27)


class TestWeeklySeries:

    def test_seven_days_oldest_first(self, today):
        series = weekly_series([], today)

        assert len(series.days) == 7
        assert series.days[0].date == "2024-06-06"
        assert series.days[-1].date == "2024-06-12"
        assert series.labels == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]

    def test_sums_per_day(self, today):
        workouts = [
            make_workout("2024-06-12", 30, workout_id="a", steps=1000, calories=200),
            make_workout("2024-06-12", 15, workout_id="b", calories=50),
            make_workout("2024-06-10", 20, workout_id="c", steps=300),
            make_workout("2024-06-01", 99, workout_id="old", steps=9999),
        ]
        series = weekly_series(workouts, today)

        assert series.per_day_totals[-1] == {"steps": 1000, "calories": 250, "duration": 45}
        assert series.per_day_totals[4] == {"steps": 300, "calories": 0, "duration": 20}
        assert sum(d["steps"] for d in series.per_day_totals) == 1300

    def test_non_numeric_fields_count_as_zero(self, today):
        workout = Workout.model_validate(
            {"id": "x", "date": "2024-06-12", "duration": "n/a", "calories": "", "steps": "lots"}
        )
        series = weekly_series([workout], today)
        assert series.per_day_totals[-1] == {"steps": 0, "calories": 0, "duration": 0}

    def test_to_dict_shape(self, today):
        data = weekly_series([], today).to_dict()
        assert set(data) == {"labels", "perDayTotals", "days"}
        assert len(data["perDayTotals"]) == 7


class TestWeeklyTypeBreakdown:

    def test_sums_by_type_this_week(self, today):
        workouts = [
            make_workout("2024-06-10", 30, type="Cardio"),
            make_workout("2024-06-11", 20, type="Strength"),
            make_workout("2024-06-12", 25, type="Cardio"),
            make_workout("2024-06-09", 60, type="Cardio"),
        ]
        breakdown = weekly_type_breakdown(workouts, today)

        assert [(t.type, t.total_duration) for t in breakdown] == [("Cardio", 55), ("Strength", 20)]
        assert breakdown[0].to_dict() == {"type": "Cardio", "totalDuration": 55}

    def test_untyped_workouts_are_left_out(self, today):
        workouts = [make_workout("2024-06-10", 30), make_workout("2024-06-11", 20)]
        assert weekly_type_breakdown(workouts, today) == []

    def test_excludes_next_week(self, today):
        workouts = [make_workout("2024-06-17", 30, type="Yoga")]
        assert weekly_type_breakdown(workouts, today) == []


class TestTotalDurationForWeek:

    def test_this_week_scenario(self, today):
        workouts = [make_workout("2024-06-10", 30), make_workout("2024-06-11", 20)]
        assert total_duration_for_week(workouts, 0, today) == 50

    def test_window_is_half_open(self, today):
        workouts = [
            make_workout("2024-06-09", 5),
            make_workout("2024-06-10", 10),
            make_workout("2024-06-16", 20),
            make_workout("2024-06-17", 40),
        ]
        assert total_duration_for_week(workouts, 0, today) == 30

    def test_last_week(self, today):
        workouts = [
            make_workout("2024-06-03", 15),
            make_workout("2024-06-09", 5),
            make_workout("2024-06-10", 100),
        ]
        assert total_duration_for_week(workouts, 1, today) == 20

    def test_matches_filtered_sum(self, today):
        workouts = [make_workout(today - timedelta(days=i), 10 + i) for i in range(20)]
        monday = week_start(today)
        expected = sum(
            w.duration for w in workouts
            if monday.isoformat() <= w.date < (monday + timedelta(days=7)).isoformat()
        )
        assert total_duration_for_week(workouts, 0, today) == expected

    def test_negative_offset_rejected(self, today):
        with pytest.raises(ValueError):
            total_duration_for_week([], -1, today)


class TestBestWeek:

    def test_empty(self):
        best = best_week([])
        assert best.week_start is None
        assert best.total_duration == 0
        assert best.to_dict() == {"weekStart": None, "totalDuration": 0}

    def test_picks_greatest_week(self):
        workouts = [
            make_workout("2024-06-03", 30),
            make_workout("2024-06-11", 40),
            make_workout("2024-06-16", 40),
            make_workout("2024-05-28", 60),
        ]
        best = best_week(workouts)
        assert best.week_start == "2024-06-10"
        assert best.total_duration == 80

    def test_tie_goes_to_first_seen_week(self):
        workouts = [
            make_workout("2024-06-18", 30),
            make_workout("2024-06-04", 30),
        ]
        assert best_week(workouts).week_start == "2024-06-17"

        assert best_week(list(reversed(workouts))).week_start == "2024-06-03"

    def test_zero_duration_weeks_do_not_count(self):
        assert best_week([make_workout("2024-06-10", 0)]).week_start is None

    def test_unparseable_dates_ignored(self):
        workouts = [make_workout("someday", 500), make_workout("2024-06-10", 10)]
        assert best_week(workouts).week_start == "2024-06-10"


class TestStreak:

    def test_broken_when_neither_today_nor_yesterday(self):
        workouts = [make_workout("2024-01-01", 30)]
        assert streak(workouts, [], date(2024, 1, 10)) == 0

    def test_three_day_streak_with_gap(self, today):
        workouts = [make_workout(today - timedelta(days=i), 30) for i in (0, 1, 2, 4, 5)]
        assert streak(workouts, [], today) == 3

    def test_starts_from_yesterday_when_today_empty(self, today):
        workouts = [make_workout(today - timedelta(days=i), 30) for i in (1, 2)]
        assert streak(workouts, [], today) == 2

    def test_rest_days_keep_streak_alive(self, today):
        workouts = [make_workout(today, 30), make_workout(today - timedelta(days=2), 30)]
        rest_days = [(today - timedelta(days=1)).isoformat()]
        assert streak(workouts, rest_days, today) == 3

    def test_only_rest_days(self, today):
        assert streak([], [today.isoformat()], today) == 1

    def test_multiple_workouts_same_day_count_once(self, today):
        workouts = [make_workout(today, 10, workout_id="a"), make_workout(today, 20, workout_id="b")]
        assert streak(workouts, [], today) == 1

    def test_empty(self, today):
        assert streak([], [], today) == 0

    def test_across_month_boundary(self):
        today = date(2024, 3, 2)
        workouts = [make_workout(today - timedelta(days=i), 30) for i in range(4)]
        assert streak(workouts, [], today) == 4


class TestCalendarWeekStatus:

    def test_statuses_for_midweek(self, today):
        workouts = [make_workout("2024-06-10", 30)]
        rest_days = ["2024-06-11"]

        calendar = calendar_week_status(workouts, rest_days, today)

        assert [d.day for d in calendar] == ["M", "T", "W", "T", "F", "S", "S"]
        assert [d.date for d in calendar][0] == "2024-06-10"
        assert [d.status for d in calendar] == [
            DayStatus.COMPLETED,
            DayStatus.REST,
            DayStatus.TODAY,
            DayStatus.FUTURE,
            DayStatus.FUTURE,
            DayStatus.FUTURE,
            DayStatus.FUTURE,
        ]

    def test_past_day_without_activity_is_none(self):
        calendar = calendar_week_status([], [], date(2024, 6, 13))
        assert calendar[0].status == DayStatus.NONE
        assert calendar[3].status == DayStatus.TODAY

    def test_completed_wins_over_rest(self):
        workouts = [make_workout("2024-01-03", 30)]
        calendar = calendar_week_status(workouts, ["2024-01-03"], date(2024, 1, 4))

        jan3 = next(d for d in calendar if d.date == "2024-01-03")
        assert jan3.status == DayStatus.COMPLETED

    def test_today_with_workout_is_completed(self, today):
        calendar = calendar_week_status([make_workout(today, 10)], [], today)
        assert calendar[2].status == DayStatus.COMPLETED

    def test_future_workout_still_future(self, today):
        calendar = calendar_week_status([make_workout("2024-06-14", 10)], [], today)
        assert calendar[4].status == DayStatus.FUTURE

    def test_sunday_today_has_no_future_days(self):
        calendar = calendar_week_status([], [], date(2024, 6, 16))
        assert calendar[0].date == "2024-06-10"
        assert calendar[-1].status == DayStatus.TODAY
        assert DayStatus.FUTURE not in [d.status for d in calendar]

    def test_to_dict(self, today):
        entry = calendar_week_status([], [], today)[2].to_dict()
        assert entry == {"day": "W", "date": "2024-06-12", "status": "today"}


class TestFormatting:

    @pytest.mark.parametrize("current,previous,expected", [
        (50, 40, "+25%"),
        (30, 40, "-25%"),
        (40, 40, "+0%"),
        (10, 0, "+100%"),
        (0, 0, "0%"),
        (1, 3, "-67%"),
    ])
    def test_percentage_change(self, current, previous, expected):
        assert percentage_change(current, previous) == expected

    @pytest.mark.parametrize("minutes,expected", [
        (0, "0m"),
        (45, "45m"),
        (60, "1h 0m"),
        (65, "1h 5m"),
        (150, "2h 30m"),
    ])
    def test_format_duration(self, minutes, expected):
        assert format_duration(minutes) == expected


class TestSnapshot:

    @pytest.mark.asyncio
    async def test_load_snapshot_reads_all_collections(self, repository, today):
        await repository.save_workout(make_workout(today, 40, type="HIIT"))
        await repository.save_rest_day((today - timedelta(days=1)).isoformat())
        await repository.save_goal(WeeklyGoal(week_start=today.isoformat(), target_minutes=120))

        snapshot = await load_snapshot(repository)

        assert snapshot.ok
        assert len(snapshot.workouts) == 1
        assert snapshot.rest_days == ["2024-06-11"]
        assert snapshot.goal.target_minutes == 120

    @pytest.mark.asyncio
    async def test_snapshot_collects_errors(self, memory_store, repository, storage_keys):
        memory_store.set_raw(storage_keys.rest_days, "???")
        snapshot = await load_snapshot(repository)
        assert not snapshot.ok
        assert len(snapshot.errors) == 1
        assert snapshot.rest_days == []

    def test_progress_summary(self, today):
        snapshot = ActivitySnapshot(
            workouts=[
                make_workout("2024-06-12", 30, type="Cardio"),
                make_workout("2024-06-11", 30, type="Yoga"),
                make_workout("2024-06-04", 40, type="Cardio"),
            ],
            rest_days=["2024-06-10"],
        )
        summary = snapshot.progress_summary(today)

        assert summary["streak"] == 3
        assert summary["totalDuration"] == 60
        assert summary["lastWeekDuration"] == 40
        assert summary["percentageChange"] == "+50%"
        assert summary["bestWeek"] == {"weekStart": "2024-06-10", "totalDuration": 60}
        assert summary["calendar"][0]["status"] == "rest"
        assert {t["type"] for t in summary["typeBreakdown"]} == {"Cardio", "Yoga"}
