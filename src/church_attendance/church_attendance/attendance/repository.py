from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ServiceType
from .model import AttendanceListingRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_member_between(
        self,
        *,
        member_id: int,
        service_type: ServiceType,
        start: datetime,
        end: datetime,
    ) -> Optional[AttendanceRecord]:
        """Existing record with start <= recorded_at < end, if any."""

        raise NotImplementedError

    def create(
        self,
        *,
        member_id: int,
        service_type: ServiceType,
        recorded_at: datetime,
        service_date: date,
        latitude: float,
        longitude: float,
        location_name: str,
    ) -> int:
        """Insert a verified record.

        Raises AlreadyMarkedError when (member_id, service_type, service_date) exists.
        """

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def get_recent_for_member(self, member_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_service_for_member(self, member_id: int) -> dict[str, int]:
        raise NotImplementedError

    def list_filtered(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        service_type: Optional[ServiceType] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[AttendanceListingRow]:
        """Admin listing, newest first. `end` is inclusive."""

        raise NotImplementedError
