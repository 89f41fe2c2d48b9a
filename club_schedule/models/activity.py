import datetime
from dataclasses import dataclass, field
from enum import Enum

from club_schedule.codec.values import parse_float
from club_schedule.core.config import settings


class ActivityKind(str, Enum):
    single_day = "single_day"
    multiple_days = "multiple_days"


class SlotKey(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


class LocationScope(str, Enum):
    global_ = "global"
    per_time_slot = "per_time_slot"
    per_day = "per_day"
    per_day_slot = "per_day_slot"


SLOT_ORDER = (SlotKey.morning, SlotKey.afternoon, SlotKey.evening)
SLOT_LABELS = {
    SlotKey.morning: "Sáng",
    SlotKey.afternoon: "Chiều",
    SlotKey.evening: "Tối",
}
SLOT_KEYS_BY_LABEL = {label: key for key, label in SLOT_LABELS.items()}
DEFAULT_SLOT_HOURS = {
    SlotKey.morning: ("07:00", "11:30"),
    SlotKey.afternoon: ("12:30", "17:00"),
    SlotKey.evening: ("17:00", "22:00"),
}


def slot_display_name(slot_key: SlotKey) -> str:
    return f"Buổi {SLOT_LABELS[slot_key]}"


def effective_radius(
    value: object,
    *,
    default: int | None = None,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Radius in meters to use for a location, defaulted and clamped."""
    default = settings.default_radius_m if default is None else default
    minimum = settings.min_radius_m if minimum is None else minimum
    maximum = settings.max_radius_m if maximum is None else maximum

    number = parse_float(value)
    if number is None:
        return default
    return int(min(maximum, max(minimum, round(number))))


def step_radius(value: object, direction: int, *, step: int | None = None) -> int:
    """Move a radius one step up (``direction > 0``) or down, staying in bounds."""
    step = settings.radius_step_m if step is None else step
    base = effective_radius(value)
    if direction > 0:
        return effective_radius(base + step)
    if direction < 0:
        return effective_radius(base - step)
    return base


@dataclass(slots=True)
class MapLocation:
    address: str
    lat: float | None = None
    lng: float | None = None
    radius: int | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def effective_radius(self) -> int:
        return effective_radius(self.radius)


@dataclass(slots=True)
class TimeSlotDefinition:
    slot_key: SlotKey
    start_time: str
    end_time: str
    is_active: bool = False
    activities: str = ""
    detailed_location: str | None = None
    location: MapLocation | None = None

    @property
    def name(self) -> str:
        return slot_display_name(self.slot_key)


@dataclass(slots=True)
class DaySchedule:
    day: int
    date: datetime.date | None
    raw_text: str = ""


@dataclass(slots=True)
class Activity:
    kind: ActivityKind
    date: datetime.date | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    time_slots: list[TimeSlotDefinition] = field(default_factory=list)
    schedule: list[DaySchedule] = field(default_factory=list)
    location: MapLocation | None = None
    slot_locations: dict[SlotKey, MapLocation] = field(default_factory=dict)

    @property
    def active_slots(self) -> list[TimeSlotDefinition]:
        return [slot for slot in self.time_slots if slot.is_active]

    def slot(self, slot_key: SlotKey) -> TimeSlotDefinition | None:
        for candidate in self.time_slots:
            if candidate.slot_key == slot_key:
                return candidate
        return None

    def day_schedule(self, day: int) -> DaySchedule | None:
        for candidate in self.schedule:
            if candidate.day == day:
                return candidate
        return None


@dataclass(slots=True)
class SlotRecord:
    slot_key: SlotKey
    start_time: str
    end_time: str
    activities: str | None = None
    detailed_location: str | None = None
    map_location: MapLocation | None = None

    @property
    def name(self) -> str:
        return slot_display_name(self.slot_key)


@dataclass(slots=True)
class DecodedDay:
    slots: list[SlotRecord] = field(default_factory=list)
    detailed_location: str | None = None
    map_location: MapLocation | None = None

    def slot(self, slot_key: SlotKey) -> SlotRecord | None:
        for record in self.slots:
            if record.slot_key == slot_key:
                return record
        return None


@dataclass(slots=True)
class DecodedScheduleDay:
    day: int
    date: datetime.date | None
    decoded: DecodedDay


@dataclass(slots=True)
class ResolvedSlotLocation:
    map_location: MapLocation | None = None
    map_scope: LocationScope | None = None
    detailed_location: str | None = None
    detailed_scope: LocationScope | None = None

    @property
    def radius(self) -> int | None:
        if self.map_location is None:
            return None
        return self.map_location.effective_radius

    @property
    def label(self) -> str | None:
        """Best display text, slot values first, then day-level values."""
        slot_scopes = (LocationScope.per_day_slot, LocationScope.per_time_slot)
        candidates = [
            (self.map_scope in slot_scopes, self.map_location.address if self.map_location else None),
            (self.detailed_scope in slot_scopes, self.detailed_location),
            (True, self.map_location.address if self.map_location else None),
            (True, self.detailed_location),
        ]
        for eligible, text in candidates:
            if eligible and text:
                return text
        return None
