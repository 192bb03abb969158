from __future__ import annotations

from typing import Optional, Protocol

from .model import Member


class MemberRepository(Protocol):
    """Read-only view of the member registry."""

    def get_by_email(self, email: str) -> Optional[Member]:
        raise NotImplementedError
