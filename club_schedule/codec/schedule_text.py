"""Text format of a multi-day activity's per-day schedule.

Each day of a multi-day activity stores one text blob. Every non-empty line is
one of::

    Buổi Sáng (07:00-11:30) - <activities> - Địa điểm chi tiết: <text> - Địa điểm map: <location>
    Địa điểm chi tiết: <text>
    Địa điểm map: <location>

Slot lines describe one of the three named slots, the other two shapes set the
day-level fallback. ``<location>`` exists in two encodings written by different
versions of the authoring screens::

    Hội trường B (10.7325, 106.6992) - Bán kính: 150m
    lat:10.7325,lng:106.6992,address:Hội trường B,radius:150

Both are read. A trailing number pair in parentheses is always read as
coordinates, so an address such as ``Phòng (1, 2)`` only survives in the keyed
form. ``encode_day`` writes the first form and switches to the keyed one when
the first would not read back the same location. Lines that match
nothing are skipped, so free-text notes appended to a day never break decoding.
"""
import logging
import re
from decimal import Decimal

from club_schedule.codec.values import normalize_clock, parse_float, parse_radius
from club_schedule.models.activity import (
    SLOT_KEYS_BY_LABEL,
    SLOT_LABELS,
    DaySchedule,
    DecodedDay,
    DecodedScheduleDay,
    LocationScope,
    MapLocation,
    ResolvedSlotLocation,
    SlotKey,
    SlotRecord,
)

logger = logging.getLogger(__name__)

DETAIL_KEYWORD = "Địa điểm chi tiết"
MAP_KEYWORD = "Địa điểm map"
RADIUS_KEYWORD = "Bán kính"

SLOT_HEADER_RE = re.compile(
    r"^Buổi\s+(Sáng|Chiều|Tối)\s*\(\s*(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})\s*\)"
)
SEGMENT_RE = re.compile(rf"(?:^|\s*-\s*)({DETAIL_KEYWORD}|{MAP_KEYWORD}):\s*")
LEADING_DASH_RE = re.compile(r"^-\s*")
RADIUS_SUFFIX_RE = re.compile(rf"\s*-?\s*{RADIUS_KEYWORD}:\s*(\S*)\s*$")
COORDINATES_RE = re.compile(
    r"^(.*?)\s*\(\s*([-+]?\d+(?:\.\d+)?)\s*,\s*([-+]?\d+(?:\.\d+)?)\s*\)$"
)
KEYED_LOCATION_RE = re.compile(
    r"^lat:\s*([^,]*?)\s*,\s*lng:\s*([^,]*?)\s*,\s*address:\s*(.*?)\s*,\s*radius:\s*([^,\s]*)",
    re.IGNORECASE,
)


def decode_day(raw_text: str | None) -> DecodedDay:
    decoded = DecodedDay()
    if not raw_text:
        return decoded

    for raw_line in raw_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        header = SLOT_HEADER_RE.match(line)
        if header:
            _store_slot(decoded, _parse_slot_line(header, line))
            continue

        if line.startswith((DETAIL_KEYWORD, MAP_KEYWORD)):
            _, segments = _split_segments(line)
            if DETAIL_KEYWORD in segments:
                decoded.detailed_location = segments[DETAIL_KEYWORD] or None
            if MAP_KEYWORD in segments:
                decoded.map_location = parse_map_location(segments[MAP_KEYWORD])
            if segments:
                continue

        logger.debug("Skipping unrecognized schedule line: %r", line)

    return decoded


def decode_schedule(days: list[DaySchedule]) -> list[DecodedScheduleDay]:
    return [
        DecodedScheduleDay(day=item.day, date=item.date, decoded=decode_day(item.raw_text))
        for item in days
    ]


def parse_map_location(text: str | None) -> MapLocation | None:
    """Parse either map-location encoding; ``None`` when nothing is usable."""
    if not text:
        return None
    segment = text.strip()

    keyed = KEYED_LOCATION_RE.match(segment)
    if keyed:
        lat = _parse_coordinate(keyed.group(1))
        lng = _parse_coordinate(keyed.group(2))
        radius = _parse_radius_value(keyed.group(4))
        address = keyed.group(3).strip()
        if not address and lat is None and lng is None:
            return None
        return MapLocation(address=address, lat=lat, lng=lng, radius=radius)

    radius = None
    radius_match = RADIUS_SUFFIX_RE.search(segment)
    if radius_match:
        radius = _parse_radius_value(radius_match.group(1))
        segment = segment[: radius_match.start()].strip()

    lat = lng = None
    address = segment
    coordinates = COORDINATES_RE.match(segment)
    if coordinates:
        address = coordinates.group(1).strip()
        lat = _parse_coordinate(coordinates.group(2))
        lng = _parse_coordinate(coordinates.group(3))

    if not address and lat is None and lng is None:
        return None
    return MapLocation(address=address, lat=lat, lng=lng, radius=radius)


def encode_day(decoded: DecodedDay) -> str:
    """Write a decoded day back to text; ``decode_day`` reads it back unchanged."""
    lines = [_encode_slot(record) for record in decoded.slots]
    if decoded.detailed_location:
        lines.append(f"{DETAIL_KEYWORD}: {decoded.detailed_location}")
    if decoded.map_location is not None:
        lines.append(f"{MAP_KEYWORD}: {format_map_location(decoded.map_location)}")
    return "\n".join(lines)


def format_map_location(location: MapLocation) -> str:
    text = location.address
    if location.has_coordinates:
        text = f"{text} ({_format_coordinate(location.lat)}, {_format_coordinate(location.lng)})"
    if location.radius is not None:
        text = f"{text} - {RADIUS_KEYWORD}: {location.radius}m"
    text = text.strip()
    # A lone coordinate, or an address that looks like coordinates, needs the keyed form.
    if parse_map_location(text) != location:
        return _format_keyed_location(location)
    return text


def resolve_slot_location(decoded: DecodedDay, slot_key: SlotKey) -> ResolvedSlotLocation:
    """Resolve where a slot takes place from the slot first, then the day.

    The map location and the detailed-location text are resolved separately,
    so a slot can show its own text next to the day's map pin.
    """
    record = decoded.slot(slot_key)
    resolved = ResolvedSlotLocation()

    if record is not None and record.map_location is not None:
        resolved.map_location = record.map_location
        resolved.map_scope = LocationScope.per_day_slot
    elif decoded.map_location is not None:
        resolved.map_location = decoded.map_location
        resolved.map_scope = LocationScope.per_day

    if record is not None and record.detailed_location:
        resolved.detailed_location = record.detailed_location
        resolved.detailed_scope = LocationScope.per_day_slot
    elif decoded.detailed_location:
        resolved.detailed_location = decoded.detailed_location
        resolved.detailed_scope = LocationScope.per_day

    return resolved


def _parse_slot_line(header: re.Match, line: str) -> SlotRecord:
    lead, segments = _split_segments(line[header.end() :])
    activities = LEADING_DASH_RE.sub("", lead.strip(), count=1).strip()
    return SlotRecord(
        slot_key=SLOT_KEYS_BY_LABEL[header.group(1)],
        start_time=normalize_clock(header.group(2)),
        end_time=normalize_clock(header.group(3)),
        activities=activities or None,
        detailed_location=segments.get(DETAIL_KEYWORD) or None,
        map_location=parse_map_location(segments.get(MAP_KEYWORD)),
    )


def _store_slot(decoded: DecodedDay, record: SlotRecord) -> None:
    # A repeated slot replaces the earlier one in place.
    for index, existing in enumerate(decoded.slots):
        if existing.slot_key == record.slot_key:
            decoded.slots[index] = record
            return
    decoded.slots.append(record)


def _split_segments(text: str) -> tuple[str, dict[str, str]]:
    matches = list(SEGMENT_RE.finditer(text))
    if not matches:
        return text, {}

    segments: dict[str, str] = {}
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        segments[match.group(1)] = text[match.end() : end].strip()
    return text[: matches[0].start()], segments


def _encode_slot(record: SlotRecord) -> str:
    parts = [f"Buổi {SLOT_LABELS[record.slot_key]} ({record.start_time}-{record.end_time})"]
    if record.activities:
        parts.append(f"- {record.activities}")
    if record.detailed_location:
        parts.append(f"- {DETAIL_KEYWORD}: {record.detailed_location}")
    if record.map_location is not None:
        parts.append(f"- {MAP_KEYWORD}: {format_map_location(record.map_location)}")
    return " ".join(parts)


def _parse_coordinate(value: str) -> float | None:
    number = parse_float(value)
    if number is None and value:
        logger.debug("Invalid coordinate in schedule text: %r", value)
    return number


def _parse_radius_value(value: str) -> int | None:
    radius = parse_radius(value)
    if radius is None and value:
        logger.debug("Invalid radius in schedule text: %r", value)
    return radius


def _format_coordinate(value: float) -> str:
    # repr keeps every digit needed to read the same float back; Decimal drops the exponent.
    return format(Decimal(repr(float(value))), "f")


def _format_keyed_location(location: MapLocation) -> str:
    lat = _format_coordinate(location.lat) if location.lat is not None else ""
    lng = _format_coordinate(location.lng) if location.lng is not None else ""
    radius = location.radius if location.radius is not None else ""
    return f"lat:{lat},lng:{lng},address:{location.address},radius:{radius}"
