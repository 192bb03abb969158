from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Member:
    """Domain entity: registered church member.

    Note: Members are owned by the registry service; attendance only reads them.
    """

    member_id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }
