from __future__ import annotations

from ..config import LocationSettings
from ..errors import LocationValidationError
from ..models import GeoPosition, LocationQuery


class LocationResolver:
    """Turn user input into exactly one location query."""

    def __init__(self, settings: LocationSettings) -> None:
        self.settings = settings

    def default(self) -> LocationQuery:
        return LocationQuery.default(self.settings.city, self.settings.country)

    def for_search(self, city: str | None, country: str | None) -> LocationQuery:
        city = (city or "").strip()
        country = (country or "").strip()
        if not city or not country:
            raise LocationValidationError("Please enter both city and country for search.")
        return LocationQuery.by_city(city, country)

    def for_position(self, position: GeoPosition) -> LocationQuery:
        return LocationQuery.by_coordinates(position.latitude, position.longitude)
