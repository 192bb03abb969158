from datetime import datetime, timedelta, timezone

import pytest

from src.church_attendance.church_attendance.core.enums import ServiceType
from src.church_attendance.church_attendance.schedules.service import ServiceScheduler

# 2026-10-14 is a Wednesday, 2026-10-16 a Friday, 2026-10-17 a Saturday.
SATURDAY = datetime(2026, 10, 17)
WEDNESDAY = datetime(2026, 10, 14)
FRIDAY = datetime(2026, 10, 16)
SUNDAY = datetime(2026, 10, 18)


@pytest.mark.parametrize(
    "now, expected",
    [
        (SATURDAY.replace(hour=8), ServiceType.SABBATH_MORNING),
        (SATURDAY.replace(hour=16, minute=59), ServiceType.SABBATH_MORNING),
        (WEDNESDAY.replace(hour=17), ServiceType.WEDNESDAY_VESPERS),
        (WEDNESDAY.replace(hour=19, minute=59), ServiceType.WEDNESDAY_VESPERS),
        (FRIDAY.replace(hour=18, minute=30), ServiceType.FRIDAY_VESPERS),
    ],
)
def test_active_service_inside_window(now, expected):
    info = ServiceScheduler("Africa/Nairobi").current_service(now)
    assert info.is_service_time is True
    assert info.service_type == expected


@pytest.mark.parametrize(
    "now",
    [
        SATURDAY.replace(hour=7, minute=59),
        SATURDAY.replace(hour=17),
        WEDNESDAY.replace(hour=16, minute=59),
        WEDNESDAY.replace(hour=20),
        FRIDAY.replace(hour=10),
        SUNDAY.replace(hour=10),
    ],
)
def test_no_service_outside_windows(now):
    info = ServiceScheduler("Africa/Nairobi").current_service(now)
    assert info.is_service_time is False
    assert info.service_type is None


def test_at_most_one_service_for_every_hour_of_the_week():
    scheduler = ServiceScheduler("Africa/Nairobi")
    monday = datetime(2026, 10, 12)
    seen = {}
    for hour in range(7 * 24):
        info = scheduler.current_service(monday + timedelta(hours=hour))
        if info.is_service_time:
            seen.setdefault(info.service_type, 0)
            seen[info.service_type] += 1

    assert seen == {
        ServiceType.SABBATH_MORNING: 9,
        ServiceType.WEDNESDAY_VESPERS: 3,
        ServiceType.FRIDAY_VESPERS: 3,
    }


def test_aware_timestamp_is_converted_to_church_timezone():
    # 06:00 UTC on Saturday is 09:00 in Nairobi (UTC+3).
    now = datetime(2026, 10, 17, 6, 0, tzinfo=timezone.utc)
    assert ServiceScheduler("Africa/Nairobi").current_service(now).service_type == ServiceType.SABBATH_MORNING
    assert ServiceScheduler("UTC").current_service(now).is_service_time is False


def test_full_schedule_lists_all_services():
    schedule = ServiceScheduler().full_schedule()
    assert list(schedule) == ["sabbath", "wednesdayVespers", "fridayVespers"]
    assert schedule["sabbath"] == {"day": "Saturday", "time": "8:00 AM - 5:00 PM", "type": "SABBATH_MORNING"}
    assert schedule["fridayVespers"]["type"] == "FRIDAY_VESPERS"


def test_day_bounds_cover_local_calendar_day():
    start, end = ServiceScheduler().day_bounds(SATURDAY.replace(hour=10))
    assert start == datetime(2026, 10, 17, 0, 0)
    assert end == datetime(2026, 10, 18, 0, 0)
