from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator, Mapping

from .timeutils import sanitize_time


RELEVANT_PRAYERS = ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha")

HIDDEN_TIMINGS = frozenset({"Sunrise", "Sunset", "Imsak", "Midnight", "Firstthird", "Lastthird"})


class QueryKind(str, Enum):
    CITY = "city"
    COORDINATES = "coordinates"
    DEFAULT = "default"


class PermissionState(str, Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


@dataclass(frozen=True, slots=True)
class LocationQuery:
    kind: QueryKind
    city: str = ""
    country: str = ""
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def by_city(cls, city: str, country: str) -> "LocationQuery":
        return cls(kind=QueryKind.CITY, city=city, country=country)

    @classmethod
    def by_coordinates(cls, latitude: float, longitude: float) -> "LocationQuery":
        return cls(kind=QueryKind.COORDINATES, latitude=latitude, longitude=longitude)

    @classmethod
    def default(cls, city: str, country: str) -> "LocationQuery":
        return cls(kind=QueryKind.DEFAULT, city=city, country=country)

    @property
    def label(self) -> str:
        if self.kind is QueryKind.COORDINATES:
            return f"Your Current Location (Lat: {self.latitude:.2f}, Lon: {self.longitude:.2f})"
        return f"{self.city}, {self.country}"


@dataclass(slots=True)
class GeoPosition:
    latitude: float
    longitude: float
    obtained_at: datetime
    city: str = ""
    country: str = ""


@dataclass(slots=True)
class PrayerTimes:
    """One day's timings for one location, keyed by Aladhan timing name."""

    day: date
    query: LocationQuery
    timings: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, day: date, query: LocationQuery, raw: Mapping[str, object]) -> "PrayerTimes":
        timings: dict[str, str] = {}
        for name, value in raw.items():
            if isinstance(value, str):
                timings[str(name)] = sanitize_time(value)
        return cls(day=day, query=query, timings=timings)

    def get(self, name: str) -> str | None:
        return self.timings.get(name)

    def visible(self) -> Iterator[tuple[str, str]]:
        for name, value in self.timings.items():
            if name not in HIDDEN_TIMINGS:
                yield name, value


@dataclass(slots=True)
class PrayerEvent:
    name: str
    at: datetime
    tomorrow: bool = False

    @property
    def title(self) -> str:
        return f"Prayer Time: {self.name}"

    @property
    def body(self) -> str:
        return f"It's time for {self.name} prayer!"
