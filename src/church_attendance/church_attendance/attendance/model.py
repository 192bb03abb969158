from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ServiceType
from ..locations.model import ChurchLocation
from ..members.model import Member


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one verified attendance mark.

    Unique per (member_id, service_type, service_date); never updated.
    """

    attendance_id: int
    member_id: int
    service_type: ServiceType
    recorded_at: datetime
    service_date: date
    latitude: float
    longitude: float
    location_name: str
    verified: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "memberId": self.member_id,
            "serviceType": self.service_type.value,
            "recordedAt": self.recorded_at.isoformat(),
            "serviceDate": self.service_date.isoformat(),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "locationName": self.location_name,
            "verified": self.verified,
        }


@dataclass(frozen=True)
class AttendanceListingRow:
    """Read-model for the admin listing (record joined with its member)."""

    record: AttendanceRecord
    member: Member

    def to_dict(self) -> dict:
        return {**self.record.to_dict(), "member": self.member.to_dict()}


@dataclass(frozen=True)
class AttendanceListing:
    rows: list[AttendanceListingRow]
    total: int
    counts_by_service: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ServiceStatus:
    is_service_time: bool
    current_service: Optional[ServiceType]
    active_location: Optional[ChurchLocation]
    schedule: dict[str, dict[str, str]]

    def to_dict(self) -> dict:
        loc = self.active_location
        return {
            "isServiceTime": self.is_service_time,
            "currentService": self.current_service.value if self.current_service else None,
            "churchLocation": (
                {
                    "name": loc.name,
                    "description": loc.description,
                    "latitude": loc.latitude,
                    "longitude": loc.longitude,
                    "radius": loc.radius,
                    "address": loc.address,
                }
                if loc
                else None
            ),
            "schedule": self.schedule,
        }


@dataclass(frozen=True)
class MemberAttendanceHistory:
    member: Member
    total_count: int
    counts_by_service: dict[str, int]
    records: list[AttendanceRecord]

    def to_dict(self) -> dict:
        return {
            "member": self.member.to_dict(),
            "totalAttendances": self.total_count,
            "byService": self.counts_by_service,
            "recentAttendances": [r.to_dict() for r in self.records],
        }
