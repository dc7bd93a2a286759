from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import Callable, Mapping, Protocol

from .models import RELEVANT_PRAYERS, PermissionState, PrayerEvent
from .notifications import NotificationCenter
from .timeutils import at_clock

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def stop(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


@dataclass(slots=True)
class PendingNotification:
    event: PrayerEvent
    handle: TimerHandle


def _prayer_slots(timings: Mapping[str, str], now: datetime) -> list[PrayerEvent]:
    slots: list[PrayerEvent] = []
    for name in RELEVANT_PRAYERS:
        value = timings.get(name)
        if not value:
            continue
        try:
            slots.append(PrayerEvent(name=name, at=at_clock(now.date(), value)))
        except ValueError:
            logger.debug("Skipping %s with unreadable time %r", name, value)
    slots.sort(key=lambda slot: slot.at)
    return slots


def next_prayer(timings: Mapping[str, str], now: datetime) -> PrayerEvent | None:
    """Return the nearest relevant prayer strictly after ``now``.

    When every prayer of the day has passed, the answer is tomorrow's Fajr at
    today's Fajr clock time. ``None`` when Fajr cannot be read.
    """
    for slot in _prayer_slots(timings, now):
        if slot.at > now:
            return slot
    fajr = timings.get("Fajr")
    if not fajr:
        logger.debug("No Fajr time available, nothing to schedule")
        return None
    try:
        tomorrow_fajr = at_clock(now.date() + timedelta(days=1), fajr)
    except ValueError:
        logger.debug("Unreadable Fajr time %r, nothing to schedule", fajr)
        return None
    if tomorrow_fajr <= now:
        return None
    return PrayerEvent(name="Fajr", at=tomorrow_fajr, tomorrow=True)


class NotificationScheduler:
    """Keeps at most one deferred notification for the next prayer."""

    def __init__(self, notifier: NotificationCenter, timer_factory: TimerFactory) -> None:
        self.notifier = notifier
        self.timer_factory = timer_factory
        self.pending: PendingNotification | None = None

    def cancel(self) -> None:
        pending = self.pending
        self.pending = None
        if pending is not None:
            pending.handle.stop()
            logger.debug("Cancelled pending notification for %s", pending.event.name)

    def schedule(self, timings: Mapping[str, str], now: datetime) -> PrayerEvent | None:
        self.cancel()
        if self.notifier.permission is not PermissionState.GRANTED:
            logger.debug("Notification permission not granted, not scheduling")
            return None
        event = next_prayer(timings, now)
        if event is None:
            return None
        delay = (event.at - now).total_seconds()
        handle = self.timer_factory(delay, lambda: self._fire(event))
        self.pending = PendingNotification(event=event, handle=handle)
        logger.info(
            "Scheduling notification for %s%s in %.0f seconds",
            event.name,
            " tomorrow" if event.tomorrow else "",
            delay,
        )
        return event

    def _fire(self, event: PrayerEvent) -> None:
        if self.pending is not None and self.pending.event is event:
            self.pending = None
        # One pass per fetched set: the next prayer is only scheduled on the next fetch.
        self.notifier.show(event.title, event.body)
