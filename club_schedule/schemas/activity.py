from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from club_schedule.codec.values import (
    normalize_clock,
    parse_calendar_date,
    parse_float,
    parse_optional_text,
    parse_radius,
)
from club_schedule.models.activity import (
    SLOT_KEYS_BY_LABEL,
    SLOT_ORDER,
    Activity,
    ActivityKind,
    DaySchedule,
    MapLocation,
    SlotKey,
    TimeSlotDefinition,
)

SLOT_KEYS_BY_ID = {str(position + 1): key for position, key in enumerate(SLOT_ORDER)}

_LENIENT = {"populate_by_name": True, "extra": "ignore"}


class MapLocationIn(BaseModel):
    address: str = ""
    lat: float | None = None
    lng: float | None = None
    radius: int | None = None

    model_config = _LENIENT

    @field_validator("address", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return (parse_optional_text(value) or "").strip()

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _coordinate(cls, value: Any) -> float | None:
        return parse_float(value)

    @field_validator("radius", mode="before")
    @classmethod
    def _radius(cls, value: Any) -> int | None:
        return parse_radius(value)

    def to_domain(self) -> MapLocation | None:
        if not self.address and (self.lat is None or self.lng is None):
            return None
        return MapLocation(address=self.address, lat=self.lat, lng=self.lng, radius=self.radius)


class MultiTimeLocationIn(BaseModel):
    time_slot: str | None = Field(default=None, alias="timeSlot")
    location: MapLocationIn = Field(default_factory=MapLocationIn)
    radius: int | None = None

    model_config = _LENIENT

    @field_validator("time_slot", mode="before")
    @classmethod
    def _time_slot(cls, value: Any) -> str | None:
        return parse_optional_text(value)

    @field_validator("radius", mode="before")
    @classmethod
    def _radius(cls, value: Any) -> int | None:
        return parse_radius(value)

    def slot_key(self) -> SlotKey | None:
        try:
            return SlotKey(self.time_slot)
        except ValueError:
            return None

    def to_domain(self) -> MapLocation | None:
        location = self.location.to_domain()
        if location is None:
            return None
        if self.radius is not None:
            location.radius = self.radius
        return location


class TimeSlotIn(BaseModel):
    id: str | None = None
    name: str | None = None
    slot_key: str | None = Field(default=None, alias="slotKey")
    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    is_active: bool = Field(default=False, alias="isActive")
    activities: str = ""
    detailed_location: str | None = Field(default=None, alias="detailedLocation")
    location: MapLocationIn | None = Field(
        default=None, validation_alias=AliasChoices("location", "locationData")
    )

    model_config = _LENIENT

    @field_validator("id", "name", "slot_key", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return parse_optional_text(value)

    @field_validator("start_time", "end_time", "activities", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("is_active", mode="before")
    @classmethod
    def _is_active(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False

    @field_validator("detailed_location", mode="before")
    @classmethod
    def _detailed_location(cls, value: Any) -> str | None:
        # Older documents stored an empty object here.
        if not isinstance(value, str):
            return None
        return value.strip() or None

    def resolve_slot_key(self) -> SlotKey | None:
        if self.slot_key:
            try:
                return SlotKey(self.slot_key)
            except ValueError:
                pass
        if self.name:
            label = self.name.strip().removeprefix("Buổi").strip()
            if label in SLOT_KEYS_BY_LABEL:
                return SLOT_KEYS_BY_LABEL[label]
        if self.id:
            return SLOT_KEYS_BY_ID.get(self.id)
        return None

    def to_domain(self) -> TimeSlotDefinition | None:
        slot_key = self.resolve_slot_key()
        if slot_key is None:
            return None
        return TimeSlotDefinition(
            slot_key=slot_key,
            start_time=normalize_clock(self.start_time),
            end_time=normalize_clock(self.end_time),
            is_active=self.is_active,
            activities=self.activities,
            detailed_location=self.detailed_location,
            location=self.location.to_domain() if self.location is not None else None,
        )


class ScheduleDayIn(BaseModel):
    day: int | None = None
    day_date: date | None = Field(default=None, alias="date")
    raw_text: str = Field(default="", validation_alias=AliasChoices("activities", "rawText", "raw_text"))

    model_config = _LENIENT

    @field_validator("day", mode="before")
    @classmethod
    def _day(cls, value: Any) -> int | None:
        number = parse_float(value)
        if number is None or not number.is_integer() or number < 1:
            return None
        return int(number)

    @field_validator("day_date", mode="before")
    @classmethod
    def _date(cls, value: Any) -> date | None:
        return parse_calendar_date(value)

    @field_validator("raw_text", mode="before")
    @classmethod
    def _raw_text(cls, value: Any) -> str:
        return str(value) if value is not None else ""

    def to_domain(self, position: int) -> DaySchedule:
        # Days with an unusable number keep their place in the list.
        day = self.day if self.day is not None else position
        return DaySchedule(day=day, date=self.day_date, raw_text=self.raw_text)


class ActivityIn(BaseModel):
    """Activity document as sent by the portal, in either of its two kinds."""

    kind: ActivityKind = Field(
        default=ActivityKind.single_day, validation_alias=AliasChoices("type", "kind")
    )
    activity_date: date | None = Field(default=None, alias="date")
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")
    time_slots: list[TimeSlotIn] = Field(default_factory=list, alias="timeSlots")
    schedule: list[ScheduleDayIn] = Field(default_factory=list)
    location_data: MapLocationIn | None = Field(default=None, alias="locationData")
    multi_time_locations: list[MultiTimeLocationIn] = Field(
        default_factory=list, alias="multiTimeLocations"
    )

    model_config = _LENIENT

    @field_validator("activity_date", "start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> date | None:
        return parse_calendar_date(value)

    @field_validator("time_slots", "schedule", "multi_time_locations", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self) -> Activity:
        time_slots = [slot for slot in (item.to_domain() for item in self.time_slots) if slot]

        slot_locations: dict[SlotKey, MapLocation] = {}
        for item in self.multi_time_locations:
            slot_key = item.slot_key()
            location = item.to_domain()
            if slot_key is not None and location is not None:
                slot_locations[slot_key] = location

        return Activity(
            kind=self.kind,
            date=self.activity_date,
            start_date=self.start_date,
            end_date=self.end_date,
            time_slots=time_slots,
            schedule=sorted(
                (item.to_domain(position) for position, item in enumerate(self.schedule, start=1)),
                key=lambda day: day.day,
            ),
            location=self.location_data.to_domain() if self.location_data is not None else None,
            slot_locations=slot_locations,
        )


def parse_activity(payload: dict) -> Activity:
    return ActivityIn.model_validate(payload).to_domain()
