from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Callable

import httpx  # type: ignore[import]

from ..config import GeolocationSettings
from ..errors import GeolocationDisabledError, GeolocationError, GeolocationErrorKind
from ..models import GeoPosition

logger = logging.getLogger(__name__)


class GeoLocator:
    """Resolve the user's approximate position via an IP geolocation service."""

    def __init__(
        self,
        settings: GeolocationSettings,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self._client = client
        self._clock = clock
        self._last_position: GeoPosition | None = None

    async def locate(self) -> GeoPosition:
        if not self.settings.enabled:
            raise GeolocationDisabledError()
        cached = self._reusable_position()
        if cached is not None:
            logger.debug("Reusing position obtained at %s", cached.obtained_at)
            return cached
        headers = {"Cache-Control": "no-cache"} if self.settings.maximum_age <= 0 else {}
        try:
            response = await self._get(headers)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise GeolocationError(GeolocationErrorKind.TIMEOUT) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status in (401, 403):
                raise GeolocationError(GeolocationErrorKind.PERMISSION_DENIED, f"HTTP {status}") from exc
            raise GeolocationError(GeolocationErrorKind.POSITION_UNAVAILABLE, f"HTTP {status}") from exc
        except httpx.HTTPError as exc:
            raise GeolocationError(GeolocationErrorKind.POSITION_UNAVAILABLE, str(exc)) from exc

        try:
            data: dict[str, Any] = response.json()
        except ValueError as exc:
            raise GeolocationError(GeolocationErrorKind.UNKNOWN, "invalid response") from exc
        if not isinstance(data, dict):
            raise GeolocationError(GeolocationErrorKind.UNKNOWN, "invalid response")
        position = self._parse(data)
        self._last_position = position
        logger.info("Located at %.4f, %.4f", position.latitude, position.longitude)
        return position

    async def _get(self, headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.settings.endpoint, headers=headers, timeout=self.settings.timeout)
        async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
            return await client.get(self.settings.endpoint, headers=headers)

    def _reusable_position(self) -> GeoPosition | None:
        if self._last_position is None or self.settings.maximum_age <= 0:
            return None
        age = (self._clock() - self._last_position.obtained_at).total_seconds()
        if age < self.settings.maximum_age:
            return self._last_position
        return None

    def _parse(self, data: dict[str, Any]) -> GeoPosition:
        if data.get("error"):
            reason = str(data.get("reason") or data.get("message") or "")
            raise GeolocationError(GeolocationErrorKind.POSITION_UNAVAILABLE, reason)
        lat = data.get("latitude", data.get("lat"))
        lon = data.get("longitude", data.get("lon"))
        if lat is None or lon is None:
            raise GeolocationError(GeolocationErrorKind.POSITION_UNAVAILABLE)
        try:
            latitude = float(lat)
            longitude = float(lon)
        except (TypeError, ValueError) as exc:
            raise GeolocationError(GeolocationErrorKind.POSITION_UNAVAILABLE) from exc
        return GeoPosition(
            latitude=latitude,
            longitude=longitude,
            obtained_at=self._clock(),
            city=str(data.get("city") or data.get("region") or ""),
            country=str(data.get("country_name") or data.get("country") or ""),
        )
