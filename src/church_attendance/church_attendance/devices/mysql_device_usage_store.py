from __future__ import annotations

from typing import Optional

from ..core.enums import ServiceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .store import DeviceUsageStore


class MySQLDeviceUsageStore(DeviceUsageStore):
    """Shared store backed by the `device_usage` table (composite primary key)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, device_id: str, day: str, service_type: ServiceType) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT email
                FROM device_usage
                WHERE device_id=%s AND usage_day=%s AND service_type=%s
                """,
                (device_id, day, ServiceType(service_type).value),
            )
            row = fetchone(cur)
            return row["email"] if row else None

    def check_and_set(self, *, device_id: str, day: str, service_type: ServiceType, email: str) -> str:
        params = (device_id, day, ServiceType(service_type).value)
        with db_cursor(self._conn_factory) as (_, cur):
            # Rows only live for one service day.
            cur.execute("DELETE FROM device_usage WHERE usage_day < %s", (day,))
            cur.execute(
                """
                INSERT IGNORE INTO device_usage(device_id, usage_day, service_type, email)
                VALUES(%s,%s,%s,%s)
                """,
                (*params, email),
            )
            cur.execute(
                """
                SELECT email
                FROM device_usage
                WHERE device_id=%s AND usage_day=%s AND service_type=%s
                """,
                params,
            )
            row = fetchone(cur)
            return row["email"] if row else email
