"""Notification permission and delivery (desktop via plyer, mirrored in-app)."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from plyer import notification as plyer_notification  # type: ignore[import]
from plyer.utils import platform as plyer_platform  # type: ignore[import]

from .config import NotificationSettings
from .errors import NotificationUnsupportedError
from .models import PermissionState

logger = logging.getLogger(__name__)

DESKTOP_PLATFORMS = frozenset({"linux", "win", "macosx", "android"})


class NotificationCenter:
    """Owns the permission state and displays notifications.

    Permission starts as ``default`` and moves once to ``granted`` or
    ``denied``; after that it is never asked again in the session.
    """

    def __init__(
        self,
        settings: NotificationSettings,
        mirror: Callable[[str, str], None] | None = None,
        platform: str | None = None,
    ) -> None:
        self.settings = settings
        self.mirror = mirror
        self.platform = platform if platform is not None else str(plyer_platform)
        self.permission = PermissionState.DEFAULT

    @property
    def supported(self) -> bool:
        if not self.settings.desktop:
            return self.mirror is not None
        return self.platform in DESKTOP_PLATFORMS

    async def request_permission(self, ask: Callable[[], Awaitable[bool]]) -> PermissionState:
        if not self.supported:
            raise NotificationUnsupportedError()
        if self.permission is not PermissionState.DEFAULT:
            return self.permission
        allowed = await ask()
        self.permission = PermissionState.GRANTED if allowed else PermissionState.DENIED
        logger.info("Notification permission %s", self.permission.value)
        return self.permission

    def show(self, title: str, body: str) -> None:
        if self.permission is not PermissionState.GRANTED:
            logger.debug("Dropping notification %r without permission", title)
            return
        if self.settings.desktop:
            self._send_desktop(title, body)
        if self.mirror is not None:
            self.mirror(title, body)

    def _send_desktop(self, title: str, body: str) -> None:
        try:
            plyer_notification.notify(
                app_name=self.settings.app_name,
                title=title,
                message=body,
                timeout=self.settings.timeout,
            )
        except Exception:  # plyer backends raise their own errors
            logger.exception("Desktop notification failed")
