from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from club_schedule.codec.values import parse_clock
from club_schedule.core.config import settings
from club_schedule.models.activity import TimeSlotDefinition


class CheckInType(str, Enum):
    start = "start"
    end = "end"


class CheckInTiming(str, Enum):
    on_time = "on_time"
    late = "late"
    early = "early"
    too_late = "too_late"


@dataclass(slots=True)
class CheckInWindow:
    target: datetime
    on_time_start: datetime
    on_time_end: datetime
    late_start: datetime
    late_end: datetime


@dataclass(slots=True)
class CheckInVerdict:
    timing: CheckInTiming
    minutes: int | None = None

    @property
    def needs_approval(self) -> bool:
        return self.timing == CheckInTiming.late


def check_in_window(
    day: date,
    slot: TimeSlotDefinition,
    check_in_type: CheckInType,
    *,
    tzinfo=None,
    grace_minutes: int | None = None,
    late_window_minutes: int | None = None,
) -> CheckInWindow | None:
    """Windows around a slot's start or end.

    On time is the target time plus or minus the grace window; after that a
    check-in is late (pending approval) until the late window closes.
    """
    grace = timedelta(
        minutes=settings.check_in_grace_minutes if grace_minutes is None else grace_minutes
    )
    late = timedelta(
        minutes=settings.late_window_minutes if late_window_minutes is None else late_window_minutes
    )

    clock = parse_clock(slot.start_time if check_in_type == CheckInType.start else slot.end_time)
    if clock is None:
        return None

    target = datetime.combine(day, clock, tzinfo=tzinfo)
    return CheckInWindow(
        target=target,
        on_time_start=target - grace,
        on_time_end=target + grace,
        late_start=target + grace,
        late_end=target + late,
    )


def classify_check_in(
    check_in_time: datetime,
    day: date,
    slot: TimeSlotDefinition,
    check_in_type: CheckInType,
    *,
    grace_minutes: int | None = None,
    late_window_minutes: int | None = None,
) -> CheckInVerdict | None:
    window = check_in_window(
        day,
        slot,
        check_in_type,
        tzinfo=check_in_time.tzinfo,
        grace_minutes=grace_minutes,
        late_window_minutes=late_window_minutes,
    )
    if window is None:
        return None

    if window.on_time_start <= check_in_time <= window.on_time_end:
        return CheckInVerdict(timing=CheckInTiming.on_time)

    minutes = round(abs((check_in_time - window.target).total_seconds()) / 60)
    if check_in_time < window.on_time_start:
        return CheckInVerdict(timing=CheckInTiming.early, minutes=minutes)
    if check_in_time <= window.late_end:
        return CheckInVerdict(timing=CheckInTiming.late, minutes=minutes)
    return CheckInVerdict(timing=CheckInTiming.too_late, minutes=minutes)
