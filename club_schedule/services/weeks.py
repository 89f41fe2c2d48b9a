from dataclasses import dataclass, field
from datetime import date

from club_schedule.models.activity import DaySchedule

WEEK_LENGTH = 7
SUNDAY_INDEX = 6


@dataclass(slots=True)
class DaySlot:
    weekday_index: int
    schedule: DaySchedule | None = None

    @property
    def is_empty(self) -> bool:
        return self.schedule is None


@dataclass(slots=True)
class Week:
    week_number: int
    days: list[DaySlot] = field(default_factory=list)

    @property
    def schedules(self) -> list[DaySchedule]:
        return [slot.schedule for slot in self.days if slot.schedule is not None]


def weekday_index(value: date) -> int:
    """Monday is 0, Sunday is 6."""
    return value.weekday()


def group_into_weeks(days: list[DaySchedule]) -> list[Week]:
    """Lay out days into Monday-to-Sunday weeks of exactly seven positions.

    Positions outside the given days stay empty. A day without a usable date
    takes the next free position of the open week.
    """
    weeks: list[Week] = []
    current: Week | None = None

    for schedule in days:
        index = weekday_index(schedule.date) if schedule.date is not None else None

        if current is not None and _must_close(current, index):
            _pad(current)
            current = None

        if current is None:
            current = Week(week_number=len(weeks) + 1)
            weeks.append(current)

        if index is None:
            index = len(current.days)
        while len(current.days) < index:
            current.days.append(DaySlot(weekday_index=len(current.days)))
        current.days.append(DaySlot(weekday_index=index, schedule=schedule))

    if current is not None:
        _pad(current)
    return weeks


def _must_close(week: Week, next_index: int | None) -> bool:
    if len(week.days) >= WEEK_LENGTH:
        return True
    if week.days and week.days[-1].weekday_index == SUNDAY_INDEX:
        return True
    # A day that cannot follow the last placed one starts the next week.
    return next_index is not None and next_index < len(week.days)


def _pad(week: Week) -> None:
    while len(week.days) < WEEK_LENGTH:
        week.days.append(DaySlot(weekday_index=len(week.days)))


@dataclass(slots=True, frozen=True)
class WeekCursor:
    """Position of the displayed week, always inside ``[0, total - 1]``."""

    index: int = 0
    total: int = 0

    @classmethod
    def for_weeks(cls, weeks: list[Week], index: int = 0) -> "WeekCursor":
        return cls(index=clamp_week_index(index, len(weeks)), total=len(weeks))

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.total - 1

    def previous(self) -> "WeekCursor":
        return WeekCursor(index=clamp_week_index(self.index - 1, self.total), total=self.total)

    def next(self) -> "WeekCursor":
        return WeekCursor(index=clamp_week_index(self.index + 1, self.total), total=self.total)

    def current(self, weeks: list[Week]) -> Week | None:
        if not weeks:
            return None
        return weeks[clamp_week_index(self.index, len(weeks))]


def clamp_week_index(index: int, total: int) -> int:
    if total <= 0:
        return 0
    return max(0, min(index, total - 1))
