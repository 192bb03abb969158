from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..common.validators import (
    is_blank,
    require_latitude,
    require_longitude,
    require_non_empty,
    require_positive_int,
)
from ..core.constants import DEFAULT_LOCATION_RADIUS
from ..core.enums import ServiceType
from ..core.exceptions import (
    DuplicateNameError,
    InvalidInputError,
    LocationInUseError,
    NotFoundError,
)
from .model import ChurchLocation
from .repository import LocationRepository

logger = logging.getLogger(__name__)


def parse_services(services: Optional[Iterable[Any]], *, action: str = "activate") -> list[ServiceType]:
    """Normalize a caller-supplied collection of service types, keeping first-seen order."""
    if services is None or isinstance(services, (str, bytes)):
        raise InvalidInputError(f"Please specify which services to {action} this location for")

    out: list[ServiceType] = []
    for raw in services:
        try:
            service = raw if isinstance(raw, ServiceType) else ServiceType(str(raw).strip().upper())
        except ValueError:
            raise InvalidInputError(f"Unknown service type: {raw}") from None
        if service not in out:
            out.append(service)

    if not out:
        raise InvalidInputError(f"Please specify which services to {action} this location for")
    return out


class LocationService:
    """Use case: manage church locations and which one is active per service.

    Role checks happen before these methods are called.
    """

    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def active_location_for(self, service_type: ServiceType) -> Optional[ChurchLocation]:
        return self._locations.get_active_for(ServiceType(service_type))

    def active_locations(self) -> dict[ServiceType, Optional[ChurchLocation]]:
        return {service: self._locations.get_active_for(service) for service in ServiceType}

    def list_locations(self) -> Sequence[ChurchLocation]:
        return self._locations.list_all()

    def get(self, location_id: int) -> ChurchLocation:
        location = self._locations.get_by_id(int(location_id))
        if not location:
            raise NotFoundError("Location not found")
        return location

    def create(
        self,
        *,
        name: str,
        latitude: Any,
        longitude: Any,
        radius: Any = None,
        address: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> ChurchLocation:
        name = require_non_empty(name, "Name")
        lat = require_latitude(latitude)
        lon = require_longitude(longitude)
        radius_m = DEFAULT_LOCATION_RADIUS if is_blank(radius) else require_positive_int(radius, "Radius")

        if self._locations.get_by_name(name):
            raise DuplicateNameError(name)

        location_id = self._locations.create(
            name=name,
            latitude=lat,
            longitude=lon,
            radius=radius_m,
            address=address,
            description=description,
            created_by=created_by,
        )
        logger.info("Created church location %r (id=%s, radius=%sm)", name, location_id, radius_m)
        return self.get(location_id)

    def update(self, location_id: int, **fields: Any) -> ChurchLocation:
        current = self.get(location_id)

        changes: dict[str, Any] = {}
        if not is_blank(fields.get("name")):
            name = require_non_empty(fields["name"], "Name")
            if name != current.name:
                other = self._locations.get_by_name(name)
                if other and other.location_id != current.location_id:
                    raise DuplicateNameError(name)
                changes["name"] = name
        if not is_blank(fields.get("latitude")):
            changes["latitude"] = require_latitude(fields["latitude"])
        if not is_blank(fields.get("longitude")):
            changes["longitude"] = require_longitude(fields["longitude"])
        if not is_blank(fields.get("radius")):
            changes["radius"] = require_positive_int(fields["radius"], "Radius")
        for key in ("address", "description"):
            if key in fields:
                changes[key] = fields[key]

        if changes and not self._locations.update(location_id=current.location_id, fields=changes):
            raise NotFoundError("Location not found")

        logger.info("Updated church location id=%s fields=%s", current.location_id, sorted(changes))
        return self.get(current.location_id)

    def activate_for_services(self, location_id: int, services: Iterable[Any]) -> ChurchLocation:
        wanted = parse_services(services)
        location = self.get(location_id)

        self._locations.activate(location_id=location.location_id, services=wanted)
        logger.info(
            "Location %r is now active for %s",
            location.name,
            ", ".join(s.value for s in wanted),
        )
        return self.get(location.location_id)

    def deactivate_for_services(self, location_id: int, services: Iterable[Any]) -> ChurchLocation:
        wanted = parse_services(services, action="deactivate")
        location = self.get(location_id)

        self._locations.deactivate(location_id=location.location_id, services=wanted)
        logger.info(
            "Location %r deactivated for %s",
            location.name,
            ", ".join(s.value for s in wanted),
        )
        return self.get(location.location_id)

    def delete(self, location_id: int) -> None:
        location = self.get(location_id)
        if location.is_active:
            raise LocationInUseError(location.location_id)

        if not self._locations.delete(location_id=location.location_id):
            raise NotFoundError("Location not found")
        logger.info("Deleted church location %r (id=%s)", location.name, location.location_id)
