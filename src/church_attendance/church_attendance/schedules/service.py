from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local, to_local
from ..core.constants import DEFAULT_CHURCH_TIMEZONE
from ..core.enums import ServiceType
from .model import ServiceInfo, ServiceWindow

SERVICE_WINDOWS: tuple[ServiceWindow, ...] = (
    ServiceWindow(
        key="sabbath",
        service_type=ServiceType.SABBATH_MORNING,
        weekday=5,
        day_name="Saturday",
        start_hour=8,
        end_hour=17,
        time_label="8:00 AM - 5:00 PM",
    ),
    ServiceWindow(
        key="wednesdayVespers",
        service_type=ServiceType.WEDNESDAY_VESPERS,
        weekday=2,
        day_name="Wednesday",
        start_hour=17,
        end_hour=20,
        time_label="5:00 PM - 8:00 PM",
    ),
    ServiceWindow(
        key="fridayVespers",
        service_type=ServiceType.FRIDAY_VESPERS,
        weekday=4,
        day_name="Friday",
        start_hour=17,
        end_hour=20,
        time_label="5:00 PM - 8:00 PM",
    ),
)


class ServiceScheduler:
    """Maps a timestamp to the service running at that moment, in the church timezone."""

    def __init__(self, timezone: str = DEFAULT_CHURCH_TIMEZONE, windows: Sequence[ServiceWindow] = SERVICE_WINDOWS):
        self._timezone = timezone
        self._windows = tuple(windows)

    @property
    def timezone(self) -> str:
        return self._timezone

    def now(self) -> datetime:
        return now_local(self._timezone)

    def local(self, now: Optional[datetime] = None) -> datetime:
        return to_local(now, self._timezone) if now is not None else self.now()

    def current_service(self, now: Optional[datetime] = None) -> ServiceInfo:
        local = self.local(now)
        for window in self._windows:
            if window.contains(weekday=local.weekday(), hour=local.hour):
                return ServiceInfo(service_type=window.service_type, is_service_time=True)
        return ServiceInfo(service_type=None, is_service_time=False)

    def full_schedule(self) -> dict[str, dict[str, str]]:
        return {
            w.key: {"day": w.day_name, "time": w.time_label, "type": w.service_type.value}
            for w in self._windows
        }

    def calendar_day(self, now: Optional[datetime] = None) -> date:
        return self.local(now).date()

    def day_bounds(self, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
        return day_bounds(self.calendar_day(now))
