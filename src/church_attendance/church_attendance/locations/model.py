from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LOCATION_RADIUS
from ..core.enums import ServiceType


@dataclass(frozen=True)
class ChurchLocation:
    """Domain entity: a saved venue with a geofence.

    `active_services` lists the services this location is currently the
    active venue for. Each service has at most one active location.
    """

    location_id: int
    name: str
    latitude: float
    longitude: float
    radius: int = DEFAULT_LOCATION_RADIUS
    address: Optional[str] = None
    description: Optional[str] = None
    active_services: frozenset[ServiceType] = field(default_factory=frozenset)
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def active_for_sabbath(self) -> bool:
        return ServiceType.SABBATH_MORNING in self.active_services

    @property
    def active_for_wednesday_vespers(self) -> bool:
        return ServiceType.WEDNESDAY_VESPERS in self.active_services

    @property
    def active_for_friday_vespers(self) -> bool:
        return ServiceType.FRIDAY_VESPERS in self.active_services

    @property
    def is_active(self) -> bool:
        return bool(self.active_services)

    def to_dict(self) -> dict:
        return {
            "id": self.location_id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
            "address": self.address,
            "description": self.description,
            "activeForSabbath": self.active_for_sabbath,
            "activeForWednesdayVespers": self.active_for_wednesday_vespers,
            "activeForFridayVespers": self.active_for_friday_vespers,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
