from datetime import date, timedelta

import pytest

from club_schedule.models.activity import DaySchedule
from club_schedule.services.weeks import WeekCursor, clamp_week_index, group_into_weeks, weekday_index


def _days(start: date, count: int) -> list[DaySchedule]:
    return [DaySchedule(day=offset + 1, date=start + timedelta(days=offset)) for offset in range(count)]


def test_ten_days_from_wednesday_span_two_weeks() -> None:
    days = _days(date(2024, 5, 1), 10)

    weeks = group_into_weeks(days)

    assert [week.week_number for week in weeks] == [1, 2]
    first, second = weeks
    assert [slot.weekday_index for slot in first.days] == list(range(7))
    assert [slot.is_empty for slot in first.days] == [True, True, False, False, False, False, False]
    assert [slot.schedule.day for slot in first.days[2:]] == [1, 2, 3, 4, 5]
    assert [slot.is_empty for slot in second.days] == [False, False, False, False, False, True, True]
    assert [slot.schedule.day for slot in second.days[:5]] == [6, 7, 8, 9, 10]


def test_empty_input_has_no_weeks() -> None:
    assert group_into_weeks([]) == []


@pytest.mark.parametrize(
    ("start", "count"),
    [
        (date(2024, 4, 29), 1),
        (date(2024, 4, 29), 7),
        (date(2024, 4, 29), 14),
        (date(2024, 5, 5), 1),
        (date(2024, 5, 5), 2),
        (date(2024, 5, 3), 30),
        (date(2024, 12, 30), 9),
    ],
)
def test_every_day_is_placed_once_in_full_weeks(start: date, count: int) -> None:
    days = _days(start, count)

    weeks = group_into_weeks(days)

    assert all(len(week.days) == 7 for week in weeks)
    assert [week.week_number for week in weeks] == list(range(1, len(weeks) + 1))
    assert [schedule for week in weeks for schedule in week.schedules] == days
    for week in weeks:
        for slot in week.days:
            if slot.schedule is not None:
                assert slot.weekday_index == weekday_index(slot.schedule.date)
    leading_gap = weekday_index(start)
    assert len(weeks) == -(-(leading_gap + count) // 7)


def test_single_sunday_fills_the_last_position() -> None:
    (week,) = group_into_weeks(_days(date(2024, 5, 5), 1))

    assert [slot.is_empty for slot in week.days] == [True] * 6 + [False]


def test_day_without_date_takes_next_free_position() -> None:
    days = [
        DaySchedule(day=1, date=date(2024, 5, 1)),
        DaySchedule(day=2, date=None),
        DaySchedule(day=3, date=date(2024, 5, 3)),
    ]

    (week,) = group_into_weeks(days)

    assert [slot.schedule.day if slot.schedule else None for slot in week.days] == [
        None,
        None,
        1,
        2,
        3,
        None,
        None,
    ]


def test_day_that_cannot_follow_starts_a_new_week() -> None:
    days = [
        DaySchedule(day=1, date=date(2024, 5, 2)),
        DaySchedule(day=2, date=date(2024, 5, 1)),
    ]

    weeks = group_into_weeks(days)

    assert len(weeks) == 2
    assert weeks[0].days[3].schedule is days[0]
    assert weeks[1].days[2].schedule is days[1]


def test_cursor_stays_within_bounds() -> None:
    weeks = group_into_weeks(_days(date(2024, 5, 1), 10))
    cursor = WeekCursor.for_weeks(weeks)

    assert cursor.index == 0
    assert not cursor.has_previous
    assert cursor.previous().index == 0

    cursor = cursor.next()
    assert cursor.index == 1
    assert cursor.has_previous
    assert not cursor.has_next
    assert cursor.next().index == 1
    assert cursor.current(weeks) is weeks[1]


def test_cursor_clamps_initial_index() -> None:
    weeks = group_into_weeks(_days(date(2024, 5, 1), 10))

    assert WeekCursor.for_weeks(weeks, index=9).index == 1
    assert WeekCursor.for_weeks(weeks, index=-3).index == 0


def test_cursor_over_no_weeks() -> None:
    cursor = WeekCursor.for_weeks([])

    assert cursor.index == 0
    assert not cursor.has_previous
    assert not cursor.has_next
    assert cursor.next().index == 0
    assert cursor.current([]) is None
    assert clamp_week_index(5, 0) == 0
