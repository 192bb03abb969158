from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import mysql.connector


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass(frozen=True)
class SeedLocation:
    name: str
    description: str
    latitude: float
    longitude: float
    address: str
    services: tuple[str, ...] = ()
    radius: int = 100


# Placeholder coordinates for the campus venues; replace with surveyed values.
SAMPLE_LOCATIONS: tuple[SeedLocation, ...] = (
    SeedLocation(
        name="Main Campus Church",
        description="University of Nairobi Main Campus",
        latitude=-1.2794,
        longitude=36.8156,
        address="University Way, Nairobi",
        services=("SABBATH_MORNING",),
    ),
    SeedLocation(
        name="Chiromo Campus",
        description="Chiromo Campus Venue",
        latitude=-1.2958,
        longitude=36.8063,
        address="Riverside Drive, Nairobi",
        services=("WEDNESDAY_VESPERS", "FRIDAY_VESPERS"),
    ),
    SeedLocation(
        name="Off-Campus Hall",
        description="Community Hall for Special Services",
        latitude=-1.2921,
        longitude=36.8219,
        address="Kenyatta Avenue, Nairobi",
    ),
)


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "church_attendance")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips '--' comment lines).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def seed_locations(db_config: dict, locations: Sequence[SeedLocation] = SAMPLE_LOCATIONS) -> list[str]:
    """Upsert locations by name and point their services at them (one transaction)."""
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        seeded: list[str] = []
        for loc in locations:
            cur.execute(
                """
                INSERT INTO church_locations(name, latitude, longitude, radius, address, description)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE latitude=VALUES(latitude), longitude=VALUES(longitude),
                    radius=VALUES(radius), address=VALUES(address), description=VALUES(description)
                """,
                (loc.name, loc.latitude, loc.longitude, loc.radius, loc.address, loc.description),
            )
            cur.execute("SELECT location_id FROM church_locations WHERE name=%s", (loc.name,))
            location_id = int(cur.fetchone()["location_id"])
            for service in loc.services:
                cur.execute(
                    """
                    INSERT INTO service_locations(service_type, location_id)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE location_id=VALUES(location_id), activated_at=CURRENT_TIMESTAMP
                    """,
                    (service, location_id),
                )
            seeded.append(f"{loc.name} - {'ACTIVE' if loc.services else 'Saved'}")
        conn.commit()
        return seeded
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
