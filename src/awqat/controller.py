from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Awaitable, Callable

from .config import AwqatConfig
from .errors import AwqatError, NotificationUnsupportedError, PrayerTimesError
from .models import LocationQuery, PermissionState, PrayerEvent, PrayerTimes
from .notifications import NotificationCenter
from .scheduler import NotificationScheduler, TimerFactory
from .services.geolocation import GeoLocator
from .services.location import LocationResolver
from .services.prayer import AladhanClient
from .timeutils import format_day

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Notification permission denied. You will not receive prayer time alerts."


@dataclass(slots=True)
class AppState:
    location_label: str
    current_date: str = ""
    prayer_times: PrayerTimes | None = None
    loading: bool = False
    error: str | None = None
    permission: PermissionState = PermissionState.DEFAULT


class PrayerTimesController:
    """Owns the application state and wires resolver, client and scheduler together.

    Only the most recently started fetch or location lookup may change state;
    an older one that completes later is discarded.
    """

    def __init__(
        self,
        config: AwqatConfig,
        *,
        timer_factory: TimerFactory,
        client: AladhanClient | None = None,
        geolocator: GeoLocator | None = None,
        notifier: NotificationCenter | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.resolver = LocationResolver(config.location)
        self.client = client or AladhanClient(config.prayer_settings)
        self.geolocator = geolocator or GeoLocator(config.geolocation)
        self.notifier = notifier or NotificationCenter(config.notifications)
        self.scheduler = NotificationScheduler(self.notifier, timer_factory)
        self.clock = clock
        self.state = AppState(location_label=self.resolver.default().label, permission=self.notifier.permission)
        self.last_query: LocationQuery | None = None
        self._sequence = 0
        self._listeners: list[Callable[[AppState], None]] = []

    def subscribe(self, listener: Callable[[AppState], None]) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    def _set_error(self, message: str) -> None:
        self.state.error = message
        logger.warning(message)

    async def load_default(self) -> None:
        await self.fetch(self.resolver.default())

    async def reload(self) -> None:
        await self.fetch(self.last_query or self.resolver.default())

    async def search(self, city: str | None, country: str | None) -> None:
        try:
            query = self.resolver.for_search(city, country)
        except AwqatError as exc:
            self._set_error(str(exc))
            self._emit()
            return
        await self.fetch(query)

    async def use_geolocation(self) -> None:
        self._sequence += 1
        token = self._sequence
        self.state.loading = True
        self.state.error = None
        self._emit()
        error: str | None = None
        try:
            position = await self.geolocator.locate()
        except AwqatError as exc:
            error = str(exc)
        except Exception:  # pragma: no cover - UI safeguard
            logger.exception("Unexpected geolocation failure")
            error = "Unable to retrieve your location."

        if token != self._sequence:
            logger.debug("Discarding stale geolocation result")
            return
        if error is not None:
            self._set_error(error)
            self.state.loading = False
            self._emit()
            return
        await self.fetch(self.resolver.for_position(position))

    async def fetch(self, query: LocationQuery) -> None:
        self._sequence += 1
        token = self._sequence
        today = self.clock().date()
        self.last_query = query
        self.state.loading = True
        self.state.error = None
        self.state.current_date = format_day(today)
        self._emit()

        times: PrayerTimes | None = None
        error: str | None = None
        try:
            times = await self.client.fetch(query, today)
        except PrayerTimesError as exc:
            error = f"Failed to load prayer times: {exc}. Please try again."
        except Exception as exc:  # pragma: no cover - UI safeguard
            logger.exception("Unexpected error fetching prayer times")
            error = f"Failed to load prayer times: {exc}. Please try again."

        if token != self._sequence:
            logger.debug("Discarding stale response for %s", query.label)
            return
        if error is not None:
            self._set_error(error)
        elif times is not None:
            self.state.error = None
            self.state.prayer_times = times
            self.state.location_label = query.label
            self._reschedule()
        self.state.loading = False
        self._emit()

    async def enable_notifications(self, ask: Callable[[], Awaitable[bool]]) -> None:
        try:
            permission = await self.notifier.request_permission(ask)
        except NotificationUnsupportedError as exc:
            self._set_error(str(exc))
            self._emit()
            return
        previous = self.state.permission
        self.state.permission = permission
        if permission is PermissionState.GRANTED:
            if previous is not PermissionState.GRANTED and self.state.prayer_times is not None:
                self._reschedule()
        elif permission is PermissionState.DENIED:
            self._set_error(PERMISSION_DENIED_MESSAGE)
        self._emit()

    @property
    def pending_event(self) -> PrayerEvent | None:
        pending = self.scheduler.pending
        return pending.event if pending is not None else None

    def _reschedule(self) -> None:
        times = self.state.prayer_times
        if times is None:
            return
        self.scheduler.schedule(times.timings, self.clock())

    def close(self) -> None:
        self.scheduler.cancel()
