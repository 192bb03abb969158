from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import ServiceType
from ..core.exceptions import AlreadyMarkedError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..members.model import Member
from .model import AttendanceListingRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "ar.attendance_id, ar.member_id, ar.service_type, ar.recorded_at, ar.service_date, "
    "ar.latitude, ar.longitude, ar.location_name, ar.verified"
)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        member_id=int(r["member_id"]),
        service_type=ServiceType(r["service_type"]),
        recorded_at=r["recorded_at"],
        service_date=r["service_date"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        location_name=r["location_name"],
        verified=bool(r.get("verified", True)),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_member_between(
        self,
        *,
        member_id: int,
        service_type: ServiceType,
        start: datetime,
        end: datetime,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.member_id=%s AND ar.service_type=%s
                  AND ar.recorded_at >= %s AND ar.recorded_at < %s
                ORDER BY ar.recorded_at ASC
                LIMIT 1
                """,
                (int(member_id), service_type.value, start, end),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        member_id, service_type, recorded_at, service_date,
                        latitude, longitude, location_name, verified
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                    """,
                    (int(member_id), service_type.value, recorded_at, service_date, latitude, longitude, location_name),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise AlreadyMarkedError(recorded_at=None, location_name=None) from e
            raise

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def get_recent_for_member(self, member_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.member_id=%s
                ORDER BY ar.recorded_at DESC
                LIMIT %s
                """,
                (int(member_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_service_for_member(self, member_id: int) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT service_type, COUNT(*) AS total
                FROM attendance_records
                WHERE member_id=%s
                GROUP BY service_type
                """,
                (int(member_id),),
            )
            return {r["service_type"]: int(r["total"]) for r in fetchall(cur)}

    def list_filtered(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        service_type: Optional[ServiceType] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[AttendanceListingRow]:
        clauses: list[str] = []
        params: list[object] = []

        if start is not None:
            clauses.append("ar.recorded_at >= %s")
            params.append(start)
        if end is not None:
            clauses.append("ar.recorded_at <= %s")
            params.append(end)
        if service_type is not None:
            clauses.append("ar.service_type=%s")
            params.append(service_type.value)
        if member_id is not None:
            clauses.append("ar.member_id=%s")
            params.append(int(member_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, m.email, m.first_name, m.last_name
                FROM attendance_records ar
                JOIN members m ON m.member_id = ar.member_id
                {where}
                ORDER BY ar.recorded_at DESC
                """,
                tuple(params),
            )
            return [
                AttendanceListingRow(
                    record=_to_record(r),
                    member=Member(
                        member_id=int(r["member_id"]),
                        email=r["email"],
                        first_name=r.get("first_name"),
                        last_name=r.get("last_name"),
                    ),
                )
                for r in fetchall(cur)
            ]
