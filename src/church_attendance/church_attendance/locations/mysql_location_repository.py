from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import ServiceType
from ..core.exceptions import DuplicateNameError, LocationInUseError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import ChurchLocation
from .repository import LocationRepository

_COLUMNS = "l.location_id, l.name, l.latitude, l.longitude, l.radius, l.address, l.description, l.created_by, l.created_at"
_UPDATABLE = ("name", "latitude", "longitude", "radius", "address", "description")


def _active_services_by_location(cur, location_ids: List[int]) -> Dict[int, frozenset]:
    if not location_ids:
        return {}
    placeholders = ",".join(["%s"] * len(location_ids))
    cur.execute(
        f"SELECT service_type, location_id FROM service_locations WHERE location_id IN ({placeholders})",
        tuple(location_ids),
    )
    grouped: Dict[int, set] = defaultdict(set)
    for r in fetchall(cur):
        grouped[int(r["location_id"])].add(ServiceType(r["service_type"]))
    return {k: frozenset(v) for k, v in grouped.items()}


def _to_location(row: Dict[str, Any], active: Mapping[int, frozenset]) -> ChurchLocation:
    location_id = int(row["location_id"])
    return ChurchLocation(
        location_id=location_id,
        name=row["name"],
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        radius=int(row["radius"]),
        address=row.get("address"),
        description=row.get("description"),
        active_services=active.get(location_id, frozenset()),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[ChurchLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM church_locations l WHERE {where}", params)
            row = fetchone(cur)
            if not row:
                return None
            active = _active_services_by_location(cur, [int(row["location_id"])])
            return _to_location(row, active)

    def get_by_id(self, location_id: int) -> Optional[ChurchLocation]:
        return self._get_one("l.location_id=%s", (int(location_id),))

    def get_by_name(self, name: str) -> Optional[ChurchLocation]:
        return self._get_one("l.name=%s", (name,))

    def list_all(self) -> Sequence[ChurchLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM church_locations l ORDER BY l.created_at DESC, l.location_id DESC")
            rows = fetchall(cur)
            active = _active_services_by_location(cur, [int(r["location_id"]) for r in rows])
            return [_to_location(r, active) for r in rows]

    def get_active_for(self, service_type: ServiceType) -> Optional[ChurchLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM service_locations sl
                JOIN church_locations l ON l.location_id = sl.location_id
                WHERE sl.service_type=%s
                """,
                (service_type.value,),
            )
            row = fetchone(cur)
            if not row:
                return None
            active = _active_services_by_location(cur, [int(row["location_id"])])
            return _to_location(row, active)

    def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius: int,
        address: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO church_locations(name, latitude, longitude, radius, address, description, created_by)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (name, latitude, longitude, int(radius), address, description, created_by),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateNameError(name) from e
            raise

    def update(self, *, location_id: int, fields: Mapping[str, Any]) -> bool:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not changes:
            return self.get_by_id(location_id) is not None

        assignments = ", ".join(f"{k}=%s" for k in changes)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE church_locations SET {assignments} WHERE location_id=%s",
                    (*changes.values(), int(location_id)),
                )
                # rowcount is 0 when values are unchanged, so check existence instead.
                cur.execute("SELECT 1 AS found FROM church_locations WHERE location_id=%s", (int(location_id),))
                return fetchone(cur) is not None
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateNameError(str(changes.get("name", ""))) from e
            raise

    def activate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for service in services:
                cur.execute(
                    """
                    INSERT INTO service_locations(service_type, location_id)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE location_id=VALUES(location_id), activated_at=CURRENT_TIMESTAMP
                    """,
                    (service.value, int(location_id)),
                )

    def deactivate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for service in services:
                cur.execute(
                    "DELETE FROM service_locations WHERE service_type=%s AND location_id=%s",
                    (service.value, int(location_id)),
                )

    def delete(self, *, location_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM church_locations WHERE location_id=%s", (int(location_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if getattr(e, "errno", None) == errorcode.ER_ROW_IS_REFERENCED_2:
                raise LocationInUseError(int(location_id)) from e
            raise
