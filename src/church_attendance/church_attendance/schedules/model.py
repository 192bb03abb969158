from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ServiceType


@dataclass(frozen=True)
class ServiceWindow:
    """Recurring weekly window [start_hour, end_hour) during which a service runs."""

    key: str
    service_type: ServiceType
    weekday: int  # Monday=0 ... Sunday=6
    day_name: str
    start_hour: int
    end_hour: int
    time_label: str

    def contains(self, *, weekday: int, hour: int) -> bool:
        return weekday == self.weekday and self.start_hour <= hour < self.end_hour


@dataclass(frozen=True)
class ServiceInfo:
    service_type: Optional[ServiceType]
    is_service_time: bool
