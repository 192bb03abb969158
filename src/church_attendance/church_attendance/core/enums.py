from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Admin roles issued by the external authentication service."""

    ELDER = "ELDER"
    CLERK = "CLERK"


class ServiceType(str, Enum):
    """Church services for which attendance can be marked."""

    SABBATH_MORNING = "SABBATH_MORNING"
    WEDNESDAY_VESPERS = "WEDNESDAY_VESPERS"
    FRIDAY_VESPERS = "FRIDAY_VESPERS"
