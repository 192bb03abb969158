from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeviceCheck:
    """Outcome of a device fingerprint check.

    `existing_email` is the identity first seen on the device for the key.
    """

    allowed: bool
    existing_email: Optional[str] = None
