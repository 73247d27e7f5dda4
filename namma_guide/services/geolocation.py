"""
Geolocation sources for the Application Shell.

A geolocation source answers one question: where is the user right now?
It either returns a GeoPoint or raises LocationPermissionError (denied,
unsupported, or unavailable). Callers never see any other exception.

Providers:
- IPGeolocationSource: approximate position from an IP lookup service (no key)
- StaticGeolocationSource: fixed coordinates from configuration
"""

import logging
from typing import Optional, Protocol

import httpx

from namma_guide.config import Settings
from namma_guide.schemas.places import GeoPoint, is_valid_coordinate_pair

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "NammaGuide/0.1 (location-aware recommendations)",
    "Accept": "application/json",
}


class LocationPermissionError(Exception):
    """Location is denied, unsupported, or could not be determined."""


class GeolocationSource(Protocol):
    async def get_current_position(self) -> GeoPoint:
        ...


class StaticGeolocationSource:
    """Returns configured coordinates, or reports location as unsupported."""

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude

    async def get_current_position(self) -> GeoPoint:
        if not is_valid_coordinate_pair(self.latitude, self.longitude):
            raise LocationPermissionError("Geolocation is not supported: no device coordinates configured")
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)


class IPGeolocationSource:
    """
    Approximates the device position from its public IP address.

    The default endpoint (ip-api.com) answers with
    {"status": "success", "lat": ..., "lon": ...} or {"status": "fail", ...}.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def get_current_position(self) -> GeoPoint:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=HEADERS, transport=self._transport
            ) as client:
                r = await client.get(self.url)
        except httpx.HTTPError as e:
            logger.warning(f"IP geolocation request failed: {e}")
            raise LocationPermissionError("Location lookup failed") from e

        if r.status_code != 200:
            raise LocationPermissionError(f"Location lookup returned HTTP {r.status_code}")

        try:
            data = r.json()
        except ValueError as e:
            raise LocationPermissionError("Location lookup returned invalid JSON") from e

        if not isinstance(data, dict) or data.get("status", "success") != "success":
            message = data.get("message", "unknown error") if isinstance(data, dict) else "unexpected payload"
            raise LocationPermissionError(f"Location lookup denied: {message}")

        lat = data.get("lat", data.get("latitude"))
        lon = data.get("lon", data.get("longitude"))
        try:
            lat, lon = float(lat), float(lon)
        except (TypeError, ValueError) as e:
            raise LocationPermissionError("Location lookup returned no coordinates") from e

        if not is_valid_coordinate_pair(lat, lon):
            raise LocationPermissionError("Location lookup returned out-of-range coordinates")

        logger.debug(f"IP geolocation resolved to {lat:.4f}, {lon:.4f}")
        return GeoPoint(latitude=lat, longitude=lon)


def build_geolocation_source(config: Settings) -> GeolocationSource:
    """Pick the geolocation provider named by GEOLOCATION_PROVIDER."""
    if config.GEOLOCATION_PROVIDER == "static":
        return StaticGeolocationSource(config.DEVICE_LATITUDE, config.DEVICE_LONGITUDE)
    return IPGeolocationSource(
        url=config.IP_GEOLOCATION_URL,
        timeout=config.GEOLOCATION_TIMEOUT_SECONDS,
    )
