from pathlib import Path

from src.church_attendance.church_attendance.database.bootstrap import (
    SAMPLE_LOCATIONS,
    _iter_sql_statements,
    _strip_create_db_and_use,
)

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_in_quotes_and_comment_lines():
    sql = "-- header; comment\nINSERT INTO t VALUES('a;b');\nSELECT 1;\n"
    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


def test_schema_declares_uniqueness_constraints():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    statements = list(_iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    tables = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE")]
    assert tables == ["members", "church_locations", "service_locations", "attendance_records", "device_usage"]
    assert "UNIQUE KEY uq_member_service_day (member_id, service_type, service_date)" in sql
    assert "PRIMARY KEY (device_id, usage_day, service_type)" in sql


def test_sample_locations_never_share_a_service():
    claimed = [service for loc in SAMPLE_LOCATIONS for service in loc.services]
    assert len(claimed) == len(set(claimed))
