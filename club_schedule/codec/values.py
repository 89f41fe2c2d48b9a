"""Lenient scalar parsers shared by the codec, the schemas and the services.

Every parser returns ``None`` instead of raising when the input is not usable.
"""
import math
import re
from datetime import date, datetime, time, timezone

CLOCK_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
DMY_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
NUMBER_RE = re.compile(r"^[-+]?\d+(?:\.\d+)?$")


def parse_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not NUMBER_RE.match(text):
            return None
        number = float(text)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_optional_text(value: object) -> str | None:
    """Text of a scalar value; containers and ``None`` give ``None``."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def parse_radius(value: object) -> int | None:
    """Parse a radius in meters, accepting a trailing ``m`` unit."""
    if isinstance(value, str):
        value = value.strip()
        if value.lower().endswith("m"):
            value = value[:-1].strip()
    number = parse_float(value)
    if number is None:
        return None
    return int(round(number))


def parse_clock(value: object) -> time | None:
    if not isinstance(value, str):
        return None
    match = CLOCK_RE.match(value.strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def normalize_clock(value: str) -> str:
    """Return ``HH:MM`` for a parseable clock value, else the trimmed input."""
    parsed = parse_clock(value)
    if parsed is None:
        return value.strip()
    return parsed.strftime("%H:%M")


def parse_calendar_date(value: object) -> date | None:
    """Parse the date shapes seen in activity documents.

    Accepts ``date``/``datetime`` objects, ISO strings, ``DD/MM/YYYY`` strings,
    epoch milliseconds and Mongo extended JSON (``{"$date": ...}``). A datetime
    keeps its own calendar date, no timezone conversion is applied.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        return parse_calendar_date(value.get("$date"))
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        parsed = _from_epoch_millis(value)
        return parsed.date() if parsed is not None else None

    text = str(value).strip()
    if not text:
        return None

    dmy_match = DMY_DATE_RE.match(text)
    if dmy_match:
        try:
            return date(int(dmy_match.group(3)), int(dmy_match.group(2)), int(dmy_match.group(1)))
        except ValueError:
            return None

    parsed = _parse_iso_datetime(text)
    if parsed is not None:
        return parsed.date()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_timestamp(value: object) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime. Naive input is taken as UTC."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        return parse_timestamp(value.get("$date"))
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)

    text = str(value).strip()
    if not text:
        return None
    parsed = _parse_iso_datetime(text)
    if parsed is None:
        return None
    return as_utc(parsed)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_iso_datetime(text: str) -> datetime | None:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _from_epoch_millis(value: int | float) -> datetime | None:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
