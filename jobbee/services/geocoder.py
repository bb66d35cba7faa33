# jobbee/services/geocoder.py
import logging
from typing import Optional, Protocol

import requests
from pydantic import BaseModel

from jobbee.config import Config
from jobbee.errors import GeocodingError

logger = logging.getLogger(__name__)

MAPQUEST_URL = "https://www.mapquestapi.com/geocoding/v1/address"


class GeoLocation(BaseModel):
    latitude: float
    longitude: float
    formattedAddress: Optional[str] = None
    city: Optional[str] = None
    stateCode: Optional[str] = None
    zipcode: Optional[str] = None
    countryCode: Optional[str] = None


class Geocoder(Protocol):
    def geocode(self, address: str) -> GeoLocation: ...


class MapQuestGeocoder:
    """Resolves free-form addresses and zipcodes through the MapQuest geocoding API."""

    def __init__(self, api_key: str, timeout: float = 8.0, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def geocode(self, address: str) -> GeoLocation:
        if not self.api_key:
            raise GeocodingError("GEOCODER_API_KEY is not configured")

        try:
            resp = self.session.get(
                MAPQUEST_URL,
                params={"key": self.api_key, "location": address, "maxResults": 1},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Geocoding request failed for '{address}': {e}")
            raise GeocodingError(f"Geocoding failed for '{address}'") from e

        results = payload.get("results") or []
        locations = results[0].get("locations") if results else None
        if not locations:
            raise GeocodingError(f"No location found for '{address}'")

        loc = locations[0]
        lat_lng = loc.get("latLng") or {}
        parts = [loc.get("street"), loc.get("adminArea5"), loc.get("adminArea3"),
                 loc.get("postalCode"), loc.get("adminArea1")]
        return GeoLocation(
            latitude=lat_lng.get("lat"),
            longitude=lat_lng.get("lng"),
            formattedAddress=", ".join(p for p in parts if p) or None,
            city=loc.get("adminArea5") or None,
            stateCode=loc.get("adminArea3") or None,
            zipcode=loc.get("postalCode") or None,
            countryCode=loc.get("adminArea1") or None,
        )


def create_geocoder() -> Geocoder:
    provider = Config.GEOCODER_PROVIDER.strip().lower()
    if provider != "mapquest":
        raise ValueError(f"Unsupported geocoder provider: {Config.GEOCODER_PROVIDER}")
    return MapQuestGeocoder(Config.GEOCODER_API_KEY, timeout=Config.GEOCODER_TIMEOUT)
