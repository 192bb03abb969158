from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_CHURCH_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .devices.guard import DeviceFraudGuard
from .devices.mysql_device_usage_store import MySQLDeviceUsageStore
from .devices.store import DeviceUsageStore, InMemoryDeviceUsageStore
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.repository import LocationRepository
from .locations.service import LocationService
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .schedules.service import ServiceScheduler


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    locations_repo: LocationRepository
    attendance_repo: AttendanceRepository
    device_store: DeviceUsageStore

    scheduler: ServiceScheduler
    device_guard: DeviceFraudGuard
    location_service: LocationService
    attendance_service: AttendanceService


def assemble_container(
    *,
    members_repo: MemberRepository,
    locations_repo: LocationRepository,
    attendance_repo: AttendanceRepository,
    device_store: DeviceUsageStore,
    timezone: str = DEFAULT_CHURCH_TIMEZONE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    scheduler = ServiceScheduler(timezone)
    device_guard = DeviceFraudGuard(device_store)
    location_service = LocationService(locations_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        members_repo,
        location_service,
        scheduler=scheduler,
        device_guard=device_guard,
    )

    return Container(
        conn=conn,
        members_repo=members_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        device_store=device_store,
        scheduler=scheduler,
        device_guard=device_guard,
        location_service=location_service,
        attendance_service=attendance_service,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_CHURCH_TIMEZONE,
    device_guard_backend: str = "memory",
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    if device_guard_backend == "mysql":
        device_store: DeviceUsageStore = MySQLDeviceUsageStore(conn)
    elif device_guard_backend == "memory":
        device_store = InMemoryDeviceUsageStore()
    else:
        raise ValueError(f"Unknown device guard backend: {device_guard_backend!r}")

    return assemble_container(
        members_repo=MySQLMemberRepository(conn),
        locations_repo=MySQLLocationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        device_store=device_store,
        timezone=timezone,
        conn=conn,
    )
