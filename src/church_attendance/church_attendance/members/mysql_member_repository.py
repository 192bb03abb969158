from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Member
from .repository import MemberRepository


def _to_member(row: Dict[str, Any]) -> Member:
    return Member(
        member_id=int(row["member_id"]),
        email=row["email"],
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT member_id, email, first_name, last_name
                FROM members
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _to_member(row) if row else None
