from __future__ import annotations

import threading
from typing import Optional, Protocol

from ..core.enums import ServiceType


class DeviceUsageStore(Protocol):
    """Key-value store keyed by (device_id, day, service_type).

    `check_and_set` must be atomic: store `email` if the key is absent and
    return whatever email is stored for the key afterwards. Entries from days
    before `day` are dropped along the way.
    """

    def get(self, *, device_id: str, day: str, service_type: ServiceType) -> Optional[str]:
        raise NotImplementedError

    def check_and_set(self, *, device_id: str, day: str, service_type: ServiceType, email: str) -> str:
        raise NotImplementedError


class InMemoryDeviceUsageStore(DeviceUsageStore):
    """Process-local store. Reset on restart; not shared between workers."""

    def __init__(self):
        self._entries: dict[tuple[str, str, str], str] = {}
        self._lock = threading.Lock()

    def check_and_set(self, *, device_id: str, day: str, service_type: ServiceType, email: str) -> str:
        key = (device_id, day, ServiceType(service_type).value)
        with self._lock:
            self._prune(keep_day=day)
            return self._entries.setdefault(key, email)

    def get(self, *, device_id: str, day: str, service_type: ServiceType) -> Optional[str]:
        with self._lock:
            return self._entries.get((device_id, day, ServiceType(service_type).value))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune(self, *, keep_day: str) -> None:
        # ISO dates sort chronologically; entries from earlier days can never match again.
        stale = [k for k in self._entries if k[1] < keep_day]
        for k in stale:
            del self._entries[k]
