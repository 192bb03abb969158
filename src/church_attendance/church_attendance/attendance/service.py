from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date, datetime, time
from typing import Any, Optional

from ..common.geo import distance_meters
from ..common.validators import is_blank, require_latitude, require_longitude
from ..core.constants import DEFAULT_HISTORY_LIMIT, RADIUS_TOLERANCE_METERS
from ..core.enums import ServiceType
from ..core.exceptions import (
    AlreadyMarkedError,
    DeviceAlreadyUsedError,
    InvalidInputError,
    MemberNotFoundError,
    MissingFieldsError,
    NoActiveLocationError,
    OutOfRangeError,
    OutsideServiceWindowError,
)
from ..devices.guard import DeviceFraudGuard
from ..locations.service import LocationService
from ..members.repository import MemberRepository
from ..schedules.service import ServiceScheduler
from .model import AttendanceListing, AttendanceRecord, MemberAttendanceHistory, ServiceStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AttendanceService:
    """Use case: mark geofenced attendance and read it back.

    `mark_attendance` runs its checks in a fixed order and stops at the first
    failure; cheap checks (input, time window, device) come before lookups.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberRepository,
        locations: LocationService,
        *,
        scheduler: ServiceScheduler,
        device_guard: DeviceFraudGuard,
    ):
        self._attendance = attendance
        self._members = members
        self._locations = locations
        self._scheduler = scheduler
        self._device_guard = device_guard

    def mark_attendance(
        self,
        email: Optional[str],
        latitude: Any,
        longitude: Any,
        device_id: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        missing = [
            name
            for name, value in (("email", email), ("latitude", latitude), ("longitude", longitude), ("deviceId", device_id))
            if is_blank(value)
        ]
        if missing:
            raise MissingFieldsError(missing)

        email = _normalize_email(str(email))
        device_id = str(device_id).strip()
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)

        now = self._scheduler.local(now)
        info = self._scheduler.current_service(now)
        if not info.is_service_time or info.service_type is None:
            logger.info("Rejected mark for %s: outside service window at %s", email, now.isoformat())
            raise OutsideServiceWindowError(self._scheduler.full_schedule())
        service_type = info.service_type

        today = now.date()
        check = self._device_guard.check(
            device_id=device_id,
            day=today.isoformat(),
            service_type=service_type,
            email=email,
        )
        if not check.allowed:
            raise DeviceAlreadyUsedError(device_id)

        member = self._members.get_by_email(email)
        if not member:
            logger.info("Rejected mark: no member with email %s", email)
            raise MemberNotFoundError(email)

        location = self._locations.active_location_for(service_type)
        if not location:
            logger.warning("No active location configured for %s", service_type.value)
            raise NoActiveLocationError(service_type.value)

        distance = distance_meters(lat, lon, location.latitude, location.longitude)
        if distance - location.radius > RADIUS_TOLERANCE_METERS:
            logger.info(
                "Rejected mark for %s: %.1fm from %s (radius %sm)",
                email,
                distance,
                location.name,
                location.radius,
            )
            raise OutOfRangeError(
                location_name=location.name,
                radius=location.radius,
                distance=_round_half_up(distance),
            )

        start, end = self._scheduler.day_bounds(now)
        existing = self._attendance.get_for_member_between(
            member_id=member.member_id,
            service_type=service_type,
            start=start,
            end=end,
        )
        if existing:
            raise AlreadyMarkedError(recorded_at=existing.recorded_at, location_name=existing.location_name)

        try:
            attendance_id = self._attendance.create(
                member_id=member.member_id,
                service_type=service_type,
                recorded_at=now,
                service_date=today,
                latitude=lat,
                longitude=lon,
                location_name=location.name,
            )
        except AlreadyMarkedError:
            # Lost a race with a concurrent mark; report the record that won.
            winner = self._attendance.get_for_member_between(
                member_id=member.member_id,
                service_type=service_type,
                start=start,
                end=end,
            )
            raise AlreadyMarkedError(
                recorded_at=winner.recorded_at if winner else None,
                location_name=winner.location_name if winner else None,
            ) from None

        bound = self._device_guard.check_and_record(
            device_id=device_id,
            day=today.isoformat(),
            service_type=service_type,
            email=email,
        )
        if not bound.allowed:
            # Another member claimed this device between the check and the insert.
            self._attendance.delete(attendance_id)
            raise DeviceAlreadyUsedError(device_id)

        logger.info(
            "Attendance marked for %s (%s) at %s, %.1fm from center",
            email,
            service_type.value,
            location.name,
            distance,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            member_id=member.member_id,
            service_type=service_type,
            recorded_at=now,
            service_date=today,
            latitude=lat,
            longitude=lon,
            location_name=location.name,
            verified=True,
        )

    def service_status(self, now: Optional[datetime] = None) -> ServiceStatus:
        info = self._scheduler.current_service(now)
        location = self._locations.active_location_for(info.service_type) if info.service_type else None
        return ServiceStatus(
            is_service_time=info.is_service_time,
            current_service=info.service_type,
            active_location=location,
            schedule=self._scheduler.full_schedule(),
        )

    def member_history(self, email: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> MemberAttendanceHistory:
        if int(limit) < 1:
            raise InvalidInputError("Limit must be positive")
        if is_blank(email):
            raise MissingFieldsError(["email"])

        email = _normalize_email(email)
        member = self._members.get_by_email(email)
        if not member:
            raise MemberNotFoundError(email)

        records = list(self._attendance.get_recent_for_member(member.member_id, int(limit)))
        counts = self._attendance.count_by_service_for_member(member.member_id)
        return MemberAttendanceHistory(
            member=member,
            total_count=sum(counts.values()),
            counts_by_service=counts,
            records=records,
        )

    def list_records(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        service_type: Optional[ServiceType] = None,
        member_id: Optional[int] = None,
    ) -> AttendanceListing:
        """Admin listing. `start`/`end` are inclusive calendar days."""
        if start and end and start > end:
            raise InvalidInputError("Start date must not be after end date")

        rows = list(
            self._attendance.list_filtered(
                start=datetime.combine(start, time.min) if start else None,
                end=datetime.combine(end, time.max) if end else None,
                service_type=service_type,
                member_id=member_id,
            )
        )
        counts = Counter(row.record.service_type.value for row in rows)
        return AttendanceListing(rows=rows, total=len(rows), counts_by_service=dict(counts))
