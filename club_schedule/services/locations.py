from club_schedule.codec.schedule_text import decode_day, resolve_slot_location
from club_schedule.models.activity import (
    Activity,
    ActivityKind,
    DecodedDay,
    LocationScope,
    ResolvedSlotLocation,
    SlotKey,
)


def resolve_activity_slot_location(
    activity: Activity,
    slot_key: SlotKey,
    *,
    day: int | None = None,
    decoded: DecodedDay | None = None,
) -> ResolvedSlotLocation:
    """Where ``slot_key`` of an activity (and ``day``, for multi-day) takes place.

    Single-day activities use the slot's own location, then the activity-wide
    one. Multi-day activities only use what their day text says; they never
    fall back to an activity-wide location.
    """
    if activity.kind == ActivityKind.multiple_days:
        if decoded is None:
            decoded = decoded_day_for(activity, day)
        if decoded is None:
            return ResolvedSlotLocation()
        return resolve_slot_location(decoded, slot_key)

    resolved = ResolvedSlotLocation()
    slot = activity.slot(slot_key)

    slot_location = slot.location if slot is not None else None
    if slot_location is None:
        slot_location = activity.slot_locations.get(slot_key)

    if slot_location is not None:
        resolved.map_location = slot_location
        resolved.map_scope = LocationScope.per_time_slot
    elif activity.location is not None:
        resolved.map_location = activity.location
        resolved.map_scope = LocationScope.global_

    if slot is not None and slot.detailed_location:
        resolved.detailed_location = slot.detailed_location
        resolved.detailed_scope = LocationScope.per_time_slot
    return resolved


def decoded_day_for(activity: Activity, day: int | None) -> DecodedDay | None:
    if day is None:
        return None
    schedule = activity.day_schedule(day)
    if schedule is None:
        return None
    return decode_day(schedule.raw_text)
