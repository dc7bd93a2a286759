from __future__ import annotations

from enum import Enum


class AwqatError(Exception):
    """Base class for errors surfaced to the user as a single message."""


class LocationValidationError(AwqatError):
    pass


class PrayerTimesError(AwqatError):
    pass


class TransportError(PrayerTimesError):
    """The time service could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceError(PrayerTimesError):
    """The time service answered, but the payload was malformed or flagged an error."""


class GeolocationErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


GEOLOCATION_MESSAGES = {
    GeolocationErrorKind.PERMISSION_DENIED: "Location access denied. Please enable it in your settings.",
    GeolocationErrorKind.POSITION_UNAVAILABLE: "Location information is unavailable.",
    GeolocationErrorKind.TIMEOUT: "The request to get user location timed out.",
    GeolocationErrorKind.UNKNOWN: "Unable to retrieve your location.",
}


class GeolocationError(AwqatError):
    def __init__(self, kind: GeolocationErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        message = GEOLOCATION_MESSAGES[kind]
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class GeolocationDisabledError(AwqatError):
    def __init__(self) -> None:
        super().__init__("Geolocation is not supported by this configuration.")


class NotificationUnsupportedError(AwqatError):
    def __init__(self) -> None:
        super().__init__("This system does not support desktop notifications.")
