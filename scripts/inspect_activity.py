#!/usr/bin/env python3
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from club_schedule.codec.schedule_text import decode_schedule
from club_schedule.core.logging import configure_logging
from club_schedule.models.activity import SLOT_ORDER, ActivityKind
from club_schedule.schemas.activity import parse_activity
from club_schedule.schemas.history import parse_removal_history
from club_schedule.schemas.schedule import DecodedDayRead, WeekRead
from club_schedule.services.history import dedupe_removal_history
from club_schedule.services.locations import resolve_activity_slot_location
from club_schedule.services.temporal import classify
from club_schedule.services.weeks import group_into_weeks


def _load_json(path_text: str) -> object:
    path = Path(path_text)
    if not path.exists():
        print(f"Input file not found: {path}")
        raise SystemExit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"Input file is not valid JSON: {path} ({exc})")
        raise SystemExit(1)


def _parse_now(value: str | None) -> datetime:
    if not value:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        print(f"--now must be an ISO datetime, got {value!r}")
        raise SystemExit(1)


def main() -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Decode an activity document exported from the portal. "
            "Print its time status, per-day schedule, week layout and slot locations."
        )
    )
    parser.add_argument("--input", required=True, help="Activity JSON document.")
    parser.add_argument(
        "--history",
        default=None,
        help="Optional JSON list of removal-history entries to deduplicate.",
    )
    parser.add_argument("--now", default=None, help="ISO datetime to evaluate at (default: now).")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run.")
    args = parser.parse_args()

    configure_logging(log_level=args.log_level)

    payload = _load_json(args.input)
    if not isinstance(payload, dict):
        print("Activity document must be a JSON object.")
        return 1
    try:
        activity = parse_activity(payload)
    except ValidationError as exc:
        print(f"Activity document is malformed:\n{exc}")
        return 1

    now = _parse_now(args.now)
    print(f"Kind: {activity.kind.value}")
    print(f"Status at {now.isoformat()}: {classify(now, activity).value}")

    if activity.kind == ActivityKind.single_day:
        for slot in activity.time_slots:
            resolved = resolve_activity_slot_location(activity, slot.slot_key)
            state = "on" if slot.is_active else "off"
            print(
                f"- {slot.name} {slot.start_time}-{slot.end_time} [{state}] "
                f"location={resolved.label!r} radius={resolved.radius}"
            )
    else:
        decoded_days = decode_schedule(activity.schedule)
        print(f"Days: {len(decoded_days)}")
        for item in decoded_days:
            body = DecodedDayRead.model_validate(item.decoded).model_dump(mode="json")
            print(json.dumps({"day": item.day, "date": str(item.date), **body}, ensure_ascii=False))
            for slot_key in SLOT_ORDER:
                if item.decoded.slot(slot_key) is None:
                    continue
                resolved = resolve_activity_slot_location(activity, slot_key, decoded=item.decoded)
                print(f"  {slot_key.value}: location={resolved.label!r} radius={resolved.radius}")

        weeks = group_into_weeks(activity.schedule)
        print(f"Weeks: {len(weeks)}")
        for week in weeks:
            layout = WeekRead.model_validate(week)
            cells = [str(cell.schedule.day) if cell.schedule else "." for cell in layout.days]
            print(f"  week {layout.week_number}: {' '.join(cells)}")

    if args.history:
        history_payload = _load_json(args.history)
        if not isinstance(history_payload, list):
            print("History document must be a JSON list.")
            return 1
        try:
            entries = parse_removal_history(history_payload)
        except ValidationError as exc:
            print(f"History document is malformed:\n{exc}")
            return 1
        unique = dedupe_removal_history(entries)
        print(f"Removal events: {len(unique)} (raw entries: {len(entries)})")
        for entry in unique:
            restored = entry.restored_at.isoformat() if entry.restored_at else "-"
            print(f"  removed={entry.removed_at} reason={entry.removal_reason!r} restored={restored}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
