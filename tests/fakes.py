from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from src.church_attendance.church_attendance.attendance.model import AttendanceListingRow, AttendanceRecord
from src.church_attendance.church_attendance.container import Container, assemble_container
from src.church_attendance.church_attendance.core.enums import ServiceType
from src.church_attendance.church_attendance.core.exceptions import AlreadyMarkedError, DuplicateNameError
from src.church_attendance.church_attendance.devices.store import InMemoryDeviceUsageStore
from src.church_attendance.church_attendance.locations.model import ChurchLocation
from src.church_attendance.church_attendance.members.model import Member

MAIN_CAMPUS = (-1.2794, 36.8156)


class InMemoryMembers:
    def __init__(self, members: Iterable[Member] = ()):
        self._by_email = {m.email: m for m in members}

    def add(self, member: Member) -> None:
        self._by_email[member.email] = member

    def get_by_email(self, email: str) -> Optional[Member]:
        return self._by_email.get(email)


class InMemoryLocations:
    def __init__(self):
        self._rows: dict[int, ChurchLocation] = {}
        self._active: dict[ServiceType, int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _with_services(self, loc: ChurchLocation) -> ChurchLocation:
        services = frozenset(s for s, lid in self._active.items() if lid == loc.location_id)
        return replace(loc, active_services=services)

    def get_by_id(self, location_id: int) -> Optional[ChurchLocation]:
        loc = self._rows.get(int(location_id))
        return self._with_services(loc) if loc else None

    def get_by_name(self, name: str) -> Optional[ChurchLocation]:
        loc = next((r for r in self._rows.values() if r.name == name), None)
        return self._with_services(loc) if loc else None

    def list_all(self):
        return [self._with_services(r) for r in sorted(self._rows.values(), key=lambda r: r.location_id, reverse=True)]

    def get_active_for(self, service_type: ServiceType) -> Optional[ChurchLocation]:
        location_id = self._active.get(service_type)
        return self.get_by_id(location_id) if location_id else None

    def create(self, *, name, latitude, longitude, radius, address=None, description=None, created_by=None) -> int:
        with self._lock:
            if any(r.name == name for r in self._rows.values()):
                raise DuplicateNameError(name)
            location_id = self._next_id
            self._next_id += 1
            self._rows[location_id] = ChurchLocation(
                location_id=location_id,
                name=name,
                latitude=latitude,
                longitude=longitude,
                radius=radius,
                address=address,
                description=description,
                created_by=created_by,
                created_at=datetime(2026, 10, 1, 9, 0, 0),
            )
            return location_id

    def update(self, *, location_id: int, fields: Mapping[str, Any]) -> bool:
        loc = self._rows.get(int(location_id))
        if not loc:
            return False
        self._rows[loc.location_id] = replace(loc, **fields)
        return True

    def activate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        with self._lock:
            for service in services:
                self._active[service] = int(location_id)

    def deactivate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        with self._lock:
            for service in services:
                if self._active.get(service) == int(location_id):
                    del self._active[service]

    def delete(self, *, location_id: int) -> bool:
        return self._rows.pop(int(location_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self._records: dict[tuple[int, ServiceType, date], AttendanceRecord] = {}
        self._members: dict[int, Member] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.create_calls = 0

    def get_for_member_between(self, *, member_id, service_type, start, end) -> Optional[AttendanceRecord]:
        return next(
            (
                r
                for r in self._records.values()
                if r.member_id == member_id and r.service_type == service_type and start <= r.recorded_at < end
            ),
            None,
        )

    def create(self, *, member_id, service_type, recorded_at, service_date, latitude, longitude, location_name) -> int:
        with self._lock:
            self.create_calls += 1
            key = (member_id, service_type, service_date)
            if key in self._records:
                raise AlreadyMarkedError(recorded_at=None, location_name=None)
            self._id += 1
            self._records[key] = AttendanceRecord(
                attendance_id=self._id,
                member_id=member_id,
                service_type=service_type,
                recorded_at=recorded_at,
                service_date=service_date,
                latitude=latitude,
                longitude=longitude,
                location_name=location_name,
            )
            return self._id

    def delete(self, attendance_id: int) -> bool:
        with self._lock:
            key = next((k for k, r in self._records.items() if r.attendance_id == attendance_id), None)
            return self._records.pop(key, None) is not None

    def all(self) -> list[AttendanceRecord]:
        return sorted(self._records.values(), key=lambda r: r.recorded_at, reverse=True)

    def get_recent_for_member(self, member_id: int, limit: int):
        return [r for r in self.all() if r.member_id == member_id][:limit]

    def count_by_service_for_member(self, member_id: int) -> dict[str, int]:
        counts: dict[str, int] = {}
        for r in self._records.values():
            if r.member_id == member_id:
                counts[r.service_type.value] = counts.get(r.service_type.value, 0) + 1
        return counts

    def register_member(self, member: Member) -> None:
        self._members[member.member_id] = member

    def list_filtered(self, *, start=None, end=None, service_type=None, member_id=None):
        rows = []
        for r in self.all():
            if start is not None and r.recorded_at < start:
                continue
            if end is not None and r.recorded_at > end:
                continue
            if service_type is not None and r.service_type != service_type:
                continue
            if member_id is not None and r.member_id != member_id:
                continue
            member = self._members.get(r.member_id) or Member(member_id=r.member_id, email=f"member{r.member_id}@x.com")
            rows.append(AttendanceListingRow(record=r, member=member))
        return rows


def make_container(members: Iterable[Member] = ()) -> Container:
    members = list(members)
    attendance = InMemoryAttendance()
    for m in members:
        attendance.register_member(m)
    return assemble_container(
        members_repo=InMemoryMembers(members),
        locations_repo=InMemoryLocations(),
        attendance_repo=attendance,
        device_store=InMemoryDeviceUsageStore(),
        timezone="Africa/Nairobi",
    )
