from __future__ import annotations

import logging

from ..core.enums import ServiceType
from .model import DeviceCheck
from .store import DeviceUsageStore

logger = logging.getLogger(__name__)


class DeviceFraudGuard:
    """Stops one device from marking attendance for several members in one service-day.

    `check` only reads; the device is bound to an email by `check_and_record`
    once that member's attendance has been stored.
    """

    def __init__(self, store: DeviceUsageStore):
        self._store = store

    def check(self, *, device_id: str, day: str, service_type: ServiceType, email: str) -> DeviceCheck:
        stored = self._store.get(device_id=device_id, day=day, service_type=service_type)
        return self._outcome(stored or email, device_id=device_id, day=day, service_type=service_type, email=email)

    def check_and_record(self, *, device_id: str, day: str, service_type: ServiceType, email: str) -> DeviceCheck:
        stored = self._store.check_and_set(device_id=device_id, day=day, service_type=service_type, email=email)
        return self._outcome(stored, device_id=device_id, day=day, service_type=service_type, email=email)

    def _outcome(self, stored: str, *, device_id: str, day: str, service_type: ServiceType, email: str) -> DeviceCheck:
        if stored != email:
            logger.warning(
                "Device %s already used by %s for %s on %s; rejecting %s",
                device_id,
                stored,
                ServiceType(service_type).value,
                day,
                email,
            )
            return DeviceCheck(allowed=False, existing_email=stored)
        return DeviceCheck(allowed=True, existing_email=stored)
