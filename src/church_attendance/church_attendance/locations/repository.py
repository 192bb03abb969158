from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import ServiceType
from .model import ChurchLocation


class LocationRepository(Protocol):
    """Persistence for church locations and the service -> active location mapping.

    Implementations must keep at most one active location per service type and
    apply `activate`/`deactivate` as a single transaction.
    """

    def get_by_id(self, location_id: int) -> Optional[ChurchLocation]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[ChurchLocation]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ChurchLocation]:
        """Newest first."""

        raise NotImplementedError

    def get_active_for(self, service_type: ServiceType) -> Optional[ChurchLocation]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, *, location_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def activate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        raise NotImplementedError

    def deactivate(self, *, location_id: int, services: Iterable[ServiceType]) -> None:
        raise NotImplementedError

    def delete(self, *, location_id: int) -> bool:
        raise NotImplementedError
