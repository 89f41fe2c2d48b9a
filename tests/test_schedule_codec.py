import logging

import pytest

from club_schedule.codec.schedule_text import (
    decode_day,
    decode_schedule,
    encode_day,
    format_map_location,
    parse_map_location,
    resolve_slot_location,
)
from club_schedule.models.activity import (
    DaySchedule,
    DecodedDay,
    LocationScope,
    MapLocation,
    SlotKey,
    SlotRecord,
)


def test_decodes_slot_line_with_coordinates_and_radius() -> None:
    line = (
        "Buổi Sáng (07:00-11:30) - Chào cờ đầu tuần - Địa điểm chi tiết: Sân A1 "
        "- Địa điểm map: Hội trường B (10.7325, 106.6992) - Bán kính: 150m"
    )

    decoded = decode_day(line)

    assert decoded.slots == [
        SlotRecord(
            slot_key=SlotKey.morning,
            start_time="07:00",
            end_time="11:30",
            activities="Chào cờ đầu tuần",
            detailed_location="Sân A1",
            map_location=MapLocation(address="Hội trường B", lat=10.7325, lng=106.6992, radius=150),
        )
    ]
    assert decoded.detailed_location is None
    assert decoded.map_location is None


def test_decodes_keyed_location_format() -> None:
    line = (
        "Buổi Chiều (13:00-17:00) - Họp ban - "
        "Địa điểm map: lat:10.5,lng:106.25,address:Nhà văn hóa, Quận 1,radius:300"
    )

    record = decode_day(line).slot(SlotKey.afternoon)

    assert record is not None
    assert record.activities == "Họp ban"
    assert record.map_location == MapLocation(
        address="Nhà văn hóa, Quận 1", lat=10.5, lng=106.25, radius=300
    )


def test_slot_line_without_description() -> None:
    line = "Buổi Chiều (14:28-17:00) - Địa điểm map: KTX khu B (10.97549, 106.68699) - Bán kính: 200m"

    record = decode_day(line).slot(SlotKey.afternoon)

    assert record is not None
    assert record.activities is None
    assert record.detailed_location is None
    assert record.map_location == MapLocation(address="KTX khu B", lat=10.97549, lng=106.68699, radius=200)


def test_description_may_contain_dashes() -> None:
    record = decode_day("Buổi Tối (18:00-21:00) - Văn nghệ - giao lưu").slot(SlotKey.evening)

    assert record is not None
    assert record.activities == "Văn nghệ - giao lưu"


def test_day_level_lines_become_fallback() -> None:
    raw = "\n".join(
        [
            "Buổi Sáng (07:00-11:30) - Dọn vệ sinh",
            "Địa điểm chi tiết: Cổng chính",
            "Địa điểm map: Sân vận động (10.1, 106.2) - Bán kính: 500m",
        ]
    )

    decoded = decode_day(raw)

    assert len(decoded.slots) == 1
    assert decoded.detailed_location == "Cổng chính"
    assert decoded.map_location == MapLocation(address="Sân vận động", lat=10.1, lng=106.2, radius=500)


def test_day_level_detail_line_with_trailing_map_segment() -> None:
    decoded = decode_day("Địa điểm chi tiết: Phòng 101 - Địa điểm map: lat:10,lng:106,address:Tòa A,radius:80")

    assert decoded.detailed_location == "Phòng 101"
    assert decoded.map_location == MapLocation(address="Tòa A", lat=10.0, lng=106.0, radius=80)


def test_unrecognized_lines_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="club_schedule.codec.schedule_text")
    raw = "\n".join(
        [
            "Ghi chú: mang theo nước uống",
            "Buổi Sáng (sáng sớm) - sai định dạng",
            "",
            "Buổi Tối (17:00-22:00) - Lửa trại",
        ]
    )

    decoded = decode_day(raw)

    assert [record.slot_key for record in decoded.slots] == [SlotKey.evening]
    assert "Skipping unrecognized schedule line" in caplog.text


def test_empty_blob_decodes_to_empty_day() -> None:
    assert decode_day("") == DecodedDay()
    assert decode_day(None) == DecodedDay()


def test_invalid_numbers_become_none() -> None:
    record = decode_day(
        "Buổi Sáng (07:00-11:30) - Địa điểm map: lat:abc,lng:106.2,address:Sân B,radius:xx"
    ).slot(SlotKey.morning)

    assert record is not None
    assert record.map_location == MapLocation(address="Sân B", lat=None, lng=106.2, radius=None)
    assert record.map_location.effective_radius == 200


def test_invalid_radius_annotation_is_dropped() -> None:
    location = parse_map_location("Nhà thi đấu (10.2, 106.3) - Bán kính: rộngm")

    assert location == MapLocation(address="Nhà thi đấu", lat=10.2, lng=106.3, radius=None)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Hội trường A", MapLocation(address="Hội trường A")),
        ("Sydney (-33.8688, 151.2093)", MapLocation(address="Sydney", lat=-33.8688, lng=151.2093)),
        ("Nhà B (cơ sở 2)", MapLocation(address="Nhà B (cơ sở 2)")),
        ("Khu C - Bán kính: 300m", MapLocation(address="Khu C", radius=300)),
        ("", None),
        ("   ", None),
    ],
)
def test_parse_map_location_legacy_format(text: str, expected: MapLocation | None) -> None:
    assert parse_map_location(text) == expected


def test_repeated_slot_replaces_earlier_one() -> None:
    raw = "\n".join(
        [
            "Buổi Sáng (07:00-09:00) - Bản nháp",
            "Buổi Chiều (13:00-15:00) - Họp",
            "Buổi Sáng (07:30-10:00) - Bản chính",
        ]
    )

    decoded = decode_day(raw)

    assert [record.slot_key for record in decoded.slots] == [SlotKey.morning, SlotKey.afternoon]
    assert decoded.slots[0].activities == "Bản chính"
    assert decoded.slots[0].start_time == "07:30"


def test_single_digit_hours_are_normalized() -> None:
    record = decode_day("Buổi Sáng (7:00-9:30) - Tập trung").slot(SlotKey.morning)

    assert record is not None
    assert (record.start_time, record.end_time) == ("07:00", "09:30")


@pytest.mark.parametrize(
    "decoded",
    [
        DecodedDay(),
        DecodedDay(
            slots=[
                SlotRecord(
                    slot_key=SlotKey.morning,
                    start_time="07:00",
                    end_time="11:30",
                    activities="Chào cờ - sinh hoạt",
                    detailed_location="Sân A1",
                    map_location=MapLocation(address="Hội trường B", lat=10.7325, lng=106.6992, radius=150),
                ),
                SlotRecord(slot_key=SlotKey.evening, start_time="17:00", end_time="22:00"),
            ],
        ),
        DecodedDay(
            slots=[
                SlotRecord(
                    slot_key=SlotKey.afternoon,
                    start_time="12:30",
                    end_time="17:00",
                    map_location=MapLocation(address="Nhà B (cơ sở 2)"),
                )
            ],
            detailed_location="Cổng số 3",
            map_location=MapLocation(address="", lat=-0.000015, lng=106.123456789, radius=1000),
        ),
        DecodedDay(detailed_location="Phòng họp lớn"),
        DecodedDay(
            slots=[
                SlotRecord(
                    slot_key=SlotKey.morning,
                    start_time="07:00",
                    end_time="11:30",
                    map_location=MapLocation(address="Sân B", lat=None, lng=106.2, radius=150),
                )
            ],
        ),
        DecodedDay(map_location=MapLocation(address="", lat=10.0, radius=300)),
        DecodedDay(map_location=MapLocation(address="Phòng (1, 2)")),
        DecodedDay(map_location=MapLocation(address="Mốc 0", lat=1e-13, lng=-2.5e-20)),
    ],
)
def test_encode_then_decode_keeps_every_field(decoded: DecodedDay) -> None:
    assert decode_day(encode_day(decoded)) == decoded


def test_encoder_writes_coordinate_format() -> None:
    location = MapLocation(address="Hội trường B", lat=10.7325, lng=106.6992, radius=150)

    assert format_map_location(location) == "Hội trường B (10.7325, 106.6992) - Bán kính: 150m"


def test_decode_schedule_keeps_day_numbers() -> None:
    days = [
        DaySchedule(day=1, date=None, raw_text="Buổi Sáng (07:00-11:30) - Khai mạc"),
        DaySchedule(day=2, date=None, raw_text="không có gì"),
    ]

    decoded = decode_schedule(days)

    assert [item.day for item in decoded] == [1, 2]
    assert decoded[0].decoded.slot(SlotKey.morning) is not None
    assert decoded[1].decoded.slots == []


def test_slot_values_win_over_day_values() -> None:
    decoded = decode_day(
        "\n".join(
            [
                "Buổi Sáng (07:00-11:30) - Địa điểm chi tiết: Phòng 2 - Địa điểm map: Tòa A (10.1, 106.1)",
                "Địa điểm chi tiết: Cổng chính",
                "Địa điểm map: Sân lớn (10.2, 106.2)",
            ]
        )
    )

    resolved = resolve_slot_location(decoded, SlotKey.morning)

    assert resolved.map_location == MapLocation(address="Tòa A", lat=10.1, lng=106.1)
    assert resolved.map_scope == LocationScope.per_day_slot
    assert resolved.detailed_location == "Phòng 2"
    assert resolved.detailed_scope == LocationScope.per_day_slot
    assert resolved.radius == 200
    assert resolved.label == "Tòa A"


def test_map_and_text_fall_back_independently() -> None:
    decoded = decode_day(
        "\n".join(
            [
                "Buổi Chiều (13:00-17:00) - Thi đấu - Địa điểm chi tiết: Sân số 4",
                "Địa điểm map: Sân lớn (10.2, 106.2) - Bán kính: 2000m",
            ]
        )
    )

    resolved = resolve_slot_location(decoded, SlotKey.afternoon)

    assert resolved.map_location == MapLocation(address="Sân lớn", lat=10.2, lng=106.2, radius=2000)
    assert resolved.map_scope == LocationScope.per_day
    assert resolved.detailed_location == "Sân số 4"
    assert resolved.detailed_scope == LocationScope.per_day_slot
    assert resolved.radius == 1000
    assert resolved.label == "Sân số 4"


def test_unset_when_nothing_is_known() -> None:
    resolved = resolve_slot_location(decode_day("Buổi Tối (17:00-22:00) - Lửa trại"), SlotKey.evening)

    assert resolved.map_location is None
    assert resolved.map_scope is None
    assert resolved.detailed_location is None
    assert resolved.radius is None
    assert resolved.label is None


def test_day_text_used_for_slot_missing_from_day() -> None:
    resolved = resolve_slot_location(decode_day("Địa điểm chi tiết: Nhà văn hóa"), SlotKey.morning)

    assert resolved.detailed_location == "Nhà văn hóa"
    assert resolved.detailed_scope == LocationScope.per_day
    assert resolved.label == "Nhà văn hóa"


def test_decoded_lone_coordinate_survives_reencoding() -> None:
    decoded = decode_day("Buổi Sáng (07:00-11:30) - Địa điểm map: lat:abc,lng:106.2,address:Sân B,radius:150")

    encoded = encode_day(decoded)

    assert "lat:,lng:106.2,address:Sân B,radius:150" in encoded
    assert decode_day(encoded) == decoded


@pytest.mark.parametrize(
    ("location", "expected"),
    [
        (MapLocation(address="", lat=10.0, radius=300), "lat:10.0,lng:,address:,radius:300"),
        (MapLocation(address="Phòng (1, 2)"), "lat:,lng:,address:Phòng (1, 2),radius:"),
        (MapLocation(address="Mốc", lat=1e-13, lng=5.0), "Mốc (0.0000000000001, 5.0)"),
    ],
)
def test_encoder_output_reads_back_exactly(location: MapLocation, expected: str) -> None:
    assert format_map_location(location) == expected
    assert parse_map_location(expected) == location


def test_trailing_number_pair_reads_as_coordinates() -> None:
    assert parse_map_location("Phòng (1, 2)") == MapLocation(address="Phòng", lat=1.0, lng=2.0)
