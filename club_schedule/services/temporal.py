import logging
from datetime import datetime, timedelta
from enum import Enum

from club_schedule.codec.values import parse_clock
from club_schedule.core.config import settings
from club_schedule.models.activity import Activity, ActivityKind

logger = logging.getLogger(__name__)


class TimeStatus(str, Enum):
    before = "before"
    during = "during"
    after = "after"


def classify(now: datetime, activity: Activity, *, grace_minutes: int | None = None) -> TimeStatus:
    """Tell whether ``activity`` is upcoming, running or finished at ``now``.

    Anything that cannot be evaluated (missing dates, no active slots, an empty
    day list) is reported as ``after`` so callers never open check-in for it.
    Multi-day activities are compared by calendar date only.
    """
    if activity.kind == ActivityKind.multiple_days:
        return _classify_multiple_days(now, activity)
    return _classify_single_day(now, activity, grace_minutes=grace_minutes)


def latest_check_in_end(
    activity: Activity,
    *,
    tzinfo=None,
    grace_minutes: int | None = None,
) -> datetime | None:
    """End of the last active slot plus the grace window, or ``None``."""
    if activity.date is None:
        return None
    grace = timedelta(
        minutes=settings.check_in_grace_minutes if grace_minutes is None else grace_minutes
    )

    latest: datetime | None = None
    for slot in activity.active_slots:
        end_time = parse_clock(slot.end_time)
        if end_time is None:
            logger.debug("Ignoring slot %s with invalid end time %r", slot.slot_key.value, slot.end_time)
            continue
        window_end = datetime.combine(activity.date, end_time, tzinfo=tzinfo) + grace
        if latest is None or window_end > latest:
            latest = window_end
    return latest


def _classify_multiple_days(now: datetime, activity: Activity) -> TimeStatus:
    start, end = activity.start_date, activity.end_date
    if start is None or end is None:
        logger.debug("Multi-day activity without a valid date range: %r..%r", start, end)
        return TimeStatus.after
    if start > end or not activity.schedule:
        return TimeStatus.after

    today = now.date()
    if today < start:
        return TimeStatus.before
    if today > end:
        return TimeStatus.after
    return TimeStatus.during


def _classify_single_day(now: datetime, activity: Activity, *, grace_minutes: int | None) -> TimeStatus:
    if activity.date is None:
        logger.debug("Single-day activity without a valid date")
        return TimeStatus.after
    if not activity.active_slots:
        return TimeStatus.after

    today = now.date()
    if today < activity.date:
        return TimeStatus.before
    if today > activity.date:
        return TimeStatus.after

    latest = latest_check_in_end(activity, tzinfo=now.tzinfo, grace_minutes=grace_minutes)
    if latest is None or now > latest:
        return TimeStatus.after
    return TimeStatus.during
