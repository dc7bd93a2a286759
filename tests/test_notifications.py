from __future__ import annotations

import unittest
from unittest.mock import patch

from awqat.config import NotificationSettings
from awqat.errors import NotificationUnsupportedError
from awqat.models import PermissionState
from awqat.notifications import NotificationCenter


def _answer(value: bool):
    calls: list[int] = []

    async def ask() -> bool:
        calls.append(1)
        return value

    return ask, calls


class PermissionTests(unittest.IsolatedAsyncioTestCase):
    async def test_starts_in_default_state(self) -> None:
        center = NotificationCenter(NotificationSettings(), platform="linux")
        self.assertIs(center.permission, PermissionState.DEFAULT)

    async def test_granted_after_user_accepts(self) -> None:
        center = NotificationCenter(NotificationSettings(), platform="linux")
        ask, calls = _answer(True)

        state = await center.request_permission(ask)

        self.assertIs(state, PermissionState.GRANTED)
        self.assertEqual(len(calls), 1)

    async def test_decision_is_final_for_session(self) -> None:
        center = NotificationCenter(NotificationSettings(), platform="linux")
        deny, _ = _answer(False)
        allow, allow_calls = _answer(True)

        await center.request_permission(deny)
        state = await center.request_permission(allow)

        self.assertIs(state, PermissionState.DENIED)
        self.assertEqual(allow_calls, [])

    async def test_unsupported_platform_raises(self) -> None:
        center = NotificationCenter(NotificationSettings(desktop=True), platform="ios")
        ask, calls = _answer(True)

        with self.assertRaises(NotificationUnsupportedError):
            await center.request_permission(ask)
        self.assertEqual(calls, [])
        self.assertIs(center.permission, PermissionState.DEFAULT)

    async def test_in_app_only_requires_mirror(self) -> None:
        without_mirror = NotificationCenter(NotificationSettings(desktop=False), platform="linux")
        with_mirror = NotificationCenter(
            NotificationSettings(desktop=False),
            mirror=lambda title, body: None,
            platform="ios",
        )
        self.assertFalse(without_mirror.supported)
        self.assertTrue(with_mirror.supported)


class ShowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.mirrored: list[tuple[str, str]] = []
        self.center = NotificationCenter(
            NotificationSettings(app_name="Awqat", timeout=15),
            mirror=lambda title, body: self.mirrored.append((title, body)),
            platform="linux",
        )

    def test_dropped_without_permission(self) -> None:
        with patch("awqat.notifications.plyer_notification") as plyer:
            self.center.show("Prayer Time: Asr", "It's time for Asr prayer!")
        plyer.notify.assert_not_called()
        self.assertEqual(self.mirrored, [])

    def test_sends_desktop_and_mirrors(self) -> None:
        self.center.permission = PermissionState.GRANTED
        with patch("awqat.notifications.plyer_notification") as plyer:
            self.center.show("Prayer Time: Asr", "It's time for Asr prayer!")

        plyer.notify.assert_called_once_with(
            app_name="Awqat",
            title="Prayer Time: Asr",
            message="It's time for Asr prayer!",
            timeout=15,
        )
        self.assertEqual(self.mirrored, [("Prayer Time: Asr", "It's time for Asr prayer!")])

    def test_desktop_failure_still_mirrors(self) -> None:
        self.center.permission = PermissionState.GRANTED
        with patch("awqat.notifications.plyer_notification") as plyer:
            plyer.notify.side_effect = NotImplementedError("no backend")
            with self.assertLogs("awqat.notifications", level="ERROR"):
                self.center.show("Prayer Time: Isha", "It's time for Isha prayer!")

        self.assertEqual(len(self.mirrored), 1)

    def test_desktop_disabled_skips_plyer(self) -> None:
        self.center.settings.desktop = False
        self.center.permission = PermissionState.GRANTED
        with patch("awqat.notifications.plyer_notification") as plyer:
            self.center.show("Prayer Time: Fajr", "It's time for Fajr prayer!")
        plyer.notify.assert_not_called()
        self.assertEqual(len(self.mirrored), 1)


if __name__ == "__main__":
    unittest.main()
