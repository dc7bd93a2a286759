from __future__ import annotations

from datetime import date
import logging
from typing import Any

import httpx  # type: ignore[import]

from ..config import PrayerSettings
from ..errors import ServiceError, TransportError
from ..models import LocationQuery, PrayerTimes, QueryKind
from ..timeutils import format_day

logger = logging.getLogger(__name__)

ALADHAN_METHODS = {
    "Shia Ithna-Ansari": 0,
    "University of Islamic Sciences, Karachi": 1,
    "Islamic Society of North America": 2,
    "MuslimWorldLeague": 3,
    "UmmAlQura": 4,
    "EgyptianGeneralAuthority": 5,
    "Karachi": 1,
    "Diyanet": 13,
}

DEFAULT_METHOD = 4


def resolve_method(method_setting: str | int | None) -> int:
    method_value = ALADHAN_METHODS.get(str(method_setting), method_setting)
    try:
        return int(method_value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Unknown calculation method %r, using %d", method_setting, DEFAULT_METHOD)
        return DEFAULT_METHOD


class AladhanClient:
    """Fetch one day's timings from api.aladhan.com."""

    def __init__(self, settings: PrayerSettings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client

    def build_request(self, query: LocationQuery, day: date) -> httpx.Request:
        params: dict[str, Any] = {}
        if query.kind is QueryKind.COORDINATES:
            url = f"{self.settings.api_base}/timings/{format_day(day)}"
            params["latitude"] = query.latitude
            params["longitude"] = query.longitude
        else:
            url = f"{self.settings.api_base}/timingsByCity"
            params["city"] = query.city
            params["country"] = query.country
        params["method"] = resolve_method(self.settings.calculation_method)
        if self.settings.madhab.lower() == "hanafi":
            params["school"] = 1
        return httpx.Request("GET", url, params=params)

    async def fetch(self, query: LocationQuery, day: date) -> PrayerTimes:
        request = self.build_request(query, day)
        logger.info("Requesting prayer times for %s", query.label)
        try:
            response = await self._send(request)
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        if not response.is_success:
            raise TransportError(f"HTTP error! status: {response.status_code}", response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ServiceError("Malformed response from prayer time service") from exc
        return PrayerTimes.from_payload(day, query, _extract_timings(payload))

    async def _send(self, request: httpx.Request) -> httpx.Response:
        if self._client is not None:
            return await self._client.send(request)
        async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
            return await client.send(request)


def _extract_timings(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ServiceError("Failed to fetch prayer times.")
    data = payload.get("data")
    if payload.get("code") != 200 or payload.get("status") != "OK":
        raise ServiceError(_service_message(data))
    timings = data.get("timings") if isinstance(data, dict) else None
    if not isinstance(timings, dict) or not timings:
        raise ServiceError("Failed to fetch prayer times.")
    return timings


def _service_message(data: Any) -> str:
    if isinstance(data, str) and data:
        return data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return "Failed to fetch prayer times."
