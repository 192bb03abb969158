from __future__ import annotations

from datetime import datetime
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    `kind` is a stable identifier the API layer maps to a status code.
    """

    kind = "DomainError"

    def details(self) -> dict[str, Any]:
        """Structured payload returned to the caller next to the message."""
        return {}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "ValidationError"


# --- mark attendance -----------------------------------------------------


class MissingFieldsError(ValidationError):
    kind = "MissingFields"

    def __init__(self, fields: list[str]):
        super().__init__("Email, location, and device information are required")
        self.fields = list(fields)

    def details(self) -> dict[str, Any]:
        return {"missingFields": self.fields}


class OutsideServiceWindowError(DomainError):
    kind = "OutsideServiceWindow"

    def __init__(self, schedule: dict[str, dict[str, str]]):
        super().__init__("Attendance can only be marked during service times")
        self.schedule = schedule

    def details(self) -> dict[str, Any]:
        return {"serviceSchedule": self.schedule}


class DeviceAlreadyUsedError(DomainError):
    kind = "DeviceAlreadyUsed"

    def __init__(self, device_id: str):
        super().__init__("This device has already been used to mark attendance for a different member today.")
        self.device_id = device_id

    def details(self) -> dict[str, Any]:
        return {
            "hint": "Each person must use their own device to mark attendance. "
            "If you need help, please contact church administration."
        }


class MemberNotFoundError(DomainError):
    kind = "MemberNotFound"

    def __init__(self, email: str):
        super().__init__("Member not found with this email. Please check your email address or register first.")
        self.email = email


class NoActiveLocationError(DomainError):
    kind = "NoActiveLocation"

    def __init__(self, service_type: str):
        super().__init__("No location has been set for this service. Please contact church administration.")
        self.service_type = service_type

    def details(self) -> dict[str, Any]:
        return {"serviceType": self.service_type}


class OutOfRangeError(DomainError):
    kind = "OutOfRange"

    def __init__(self, *, location_name: str, radius: int, distance: int):
        super().__init__(f"You must be within {radius}m of {location_name} to mark attendance.")
        self.location_name = location_name
        self.radius = radius
        self.distance = distance

    def details(self) -> dict[str, Any]:
        return {
            "radius": self.radius,
            "distance": self.distance,
            "yourDistance": f"{self.distance}m away",
            "hint": "Please make sure you are physically present at the church location.",
        }


class AlreadyMarkedError(DomainError):
    """Not a real failure: the member is already recorded for this service today."""

    kind = "AlreadyMarked"

    def __init__(self, *, recorded_at: Optional[datetime], location_name: Optional[str]):
        super().__init__("You have already marked attendance for this service today!")
        self.recorded_at = recorded_at
        self.location_name = location_name

    def details(self) -> dict[str, Any]:
        return {
            "attendance": {
                "recordedAt": self.recorded_at.isoformat() if self.recorded_at else None,
                "location": self.location_name,
            }
        }


# --- location management -------------------------------------------------


class InvalidInputError(ValidationError):
    kind = "InvalidInput"


class DuplicateNameError(ValidationError):
    kind = "DuplicateName"

    def __init__(self, name: str):
        super().__init__("A location with this name already exists")
        self.name = name


class NotFoundError(DomainError):
    kind = "NotFound"


class LocationInUseError(DomainError):
    kind = "LocationInUse"

    def __init__(self, location_id: int):
        super().__init__("Cannot delete a location that is active for any service. Please deactivate it first.")
        self.location_id = location_id
