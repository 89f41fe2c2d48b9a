from datetime import date

from pydantic import BaseModel

from club_schedule.models.activity import SlotKey


class MapLocationRead(BaseModel):
    address: str
    lat: float | None
    lng: float | None
    radius: int | None
    effective_radius: int

    model_config = {"from_attributes": True}


class SlotRecordRead(BaseModel):
    slot_key: SlotKey
    name: str
    start_time: str
    end_time: str
    activities: str | None
    detailed_location: str | None
    map_location: MapLocationRead | None

    model_config = {"from_attributes": True}


class DecodedDayRead(BaseModel):
    slots: list[SlotRecordRead]
    detailed_location: str | None
    map_location: MapLocationRead | None

    model_config = {"from_attributes": True}


class DayScheduleRead(BaseModel):
    day: int
    date: date | None
    raw_text: str

    model_config = {"from_attributes": True}


class DaySlotRead(BaseModel):
    weekday_index: int
    schedule: DayScheduleRead | None

    model_config = {"from_attributes": True}


class WeekRead(BaseModel):
    week_number: int
    days: list[DaySlotRead]

    model_config = {"from_attributes": True}
