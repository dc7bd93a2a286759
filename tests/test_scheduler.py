from __future__ import annotations

from datetime import datetime
import unittest

from awqat.config import NotificationSettings
from awqat.models import PermissionState
from awqat.notifications import NotificationCenter
from awqat.scheduler import NotificationScheduler, next_prayer


TIMINGS = {
    "Fajr": "05:00",
    "Sunrise": "06:20",
    "Dhuhr": "12:10",
    "Asr": "15:30",
    "Sunset": "18:03",
    "Maghrib": "18:05",
    "Isha": "19:30",
    "Imsak": "04:50",
    "Midnight": "00:20",
}


class FakeTimer:
    def __init__(self, delay: float, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        self.callback()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def active(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.stopped]


class NextPrayerTests(unittest.TestCase):
    def test_selects_nearest_future_prayer(self) -> None:
        event = next_prayer(TIMINGS, datetime(2024, 3, 10, 17, 0))
        assert event is not None
        self.assertEqual(event.name, "Maghrib")
        self.assertEqual(event.at, datetime(2024, 3, 10, 18, 5))
        self.assertFalse(event.tomorrow)

    def test_falls_back_to_tomorrows_fajr(self) -> None:
        event = next_prayer(TIMINGS, datetime(2024, 3, 10, 20, 0))
        assert event is not None
        self.assertEqual(event.name, "Fajr")
        self.assertEqual(event.at, datetime(2024, 3, 11, 5, 0))
        self.assertTrue(event.tomorrow)

    def test_rollover_crosses_month_end(self) -> None:
        event = next_prayer(TIMINGS, datetime(2024, 2, 29, 23, 59))
        assert event is not None
        self.assertEqual(event.at, datetime(2024, 3, 1, 5, 0))

    def test_requires_strictly_later_instant(self) -> None:
        event = next_prayer(TIMINGS, datetime(2024, 3, 10, 18, 5))
        assert event is not None
        self.assertEqual(event.name, "Isha")

    def test_ignores_non_prayer_timings(self) -> None:
        event = next_prayer(TIMINGS, datetime(2024, 3, 10, 5, 30))
        assert event is not None
        self.assertEqual(event.name, "Dhuhr")

    def test_orders_unsorted_input(self) -> None:
        shuffled = {"Isha": "19:30", "Asr": "15:30", "Fajr": "05:00", "Maghrib": "18:05", "Dhuhr": "12:10"}
        event = next_prayer(shuffled, datetime(2024, 3, 10, 13, 0))
        assert event is not None
        self.assertEqual(event.name, "Asr")

    def test_no_event_without_fajr_after_isha(self) -> None:
        timings = {name: value for name, value in TIMINGS.items() if name != "Fajr"}
        self.assertIsNone(next_prayer(timings, datetime(2024, 3, 10, 21, 0)))

    def test_no_event_with_unreadable_fajr_after_isha(self) -> None:
        timings = dict(TIMINGS, Fajr="--:--")
        self.assertIsNone(next_prayer(timings, datetime(2024, 3, 10, 21, 0)))

    def test_skips_unreadable_prayer_during_day(self) -> None:
        timings = dict(TIMINGS, Maghrib="later")
        event = next_prayer(timings, datetime(2024, 3, 10, 17, 0))
        assert event is not None
        self.assertEqual(event.name, "Isha")


class NotificationSchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.shown: list[tuple[str, str]] = []
        self.notifier = NotificationCenter(
            NotificationSettings(desktop=False),
            mirror=lambda title, body: self.shown.append((title, body)),
        )
        self.notifier.permission = PermissionState.GRANTED
        self.timers = FakeTimerFactory()
        self.scheduler = NotificationScheduler(self.notifier, self.timers)

    def test_schedules_one_shot_with_delay_until_prayer(self) -> None:
        event = self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 0))

        assert event is not None
        self.assertEqual(event.name, "Maghrib")
        self.assertEqual(len(self.timers.timers), 1)
        self.assertEqual(self.timers.timers[0].delay, 65 * 60)

    def test_firing_shows_notification_and_clears_slot(self) -> None:
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 0))
        self.timers.timers[0].fire()

        self.assertEqual(self.shown, [("Prayer Time: Maghrib", "It's time for Maghrib prayer!")])
        self.assertIsNone(self.scheduler.pending)
        # no chaining to Isha after firing
        self.assertEqual(len(self.timers.timers), 1)

    def test_reschedule_cancels_previous_timer(self) -> None:
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 0))
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 19, 0))

        self.assertTrue(self.timers.timers[0].stopped)
        self.assertEqual(len(self.timers.active()), 1)
        assert self.scheduler.pending is not None
        self.assertEqual(self.scheduler.pending.event.name, "Isha")

    def test_schedules_tomorrows_fajr_after_isha(self) -> None:
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 20, 0))

        self.assertEqual(self.timers.timers[0].delay, 9 * 3600)
        self.timers.timers[0].fire()
        self.assertEqual(self.shown, [("Prayer Time: Fajr", "It's time for Fajr prayer!")])

    def test_without_permission_only_cancels(self) -> None:
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 0))
        self.notifier.permission = PermissionState.DENIED

        result = self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 30))

        self.assertIsNone(result)
        self.assertEqual(self.timers.active(), [])
        self.assertIsNone(self.scheduler.pending)

    def test_nothing_scheduled_when_fajr_missing(self) -> None:
        timings = {name: value for name, value in TIMINGS.items() if name != "Fajr"}
        self.assertIsNone(self.scheduler.schedule(timings, datetime(2024, 3, 10, 22, 0)))
        self.assertEqual(self.timers.timers, [])

    def test_stale_timer_does_not_clear_newer_slot(self) -> None:
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 17, 0))
        first = self.timers.timers[0]
        self.scheduler.schedule(TIMINGS, datetime(2024, 3, 10, 19, 0))

        first.fire()

        self.assertIsNotNone(self.scheduler.pending)


if __name__ == "__main__":
    unittest.main()
