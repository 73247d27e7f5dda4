"""
Service layer for the Namma Bengaluru Guide backend.

- places_service: Gemini + Google Maps grounding (Query Service)
- map_view: folium rendering of places (Map View)
- shell: ShellController, owner of all view state (Application Shell)
- geolocation: device location sources used by the shell
"""

from .geolocation import (
    IPGeolocationSource,
    LocationPermissionError,
    StaticGeolocationSource,
    build_geolocation_source,
)
from .map_view import MapView, map_markers, pin_style
from .places_service import PlacesServiceError, search
from .shell import QUICK_LINKS, ShellController, build_results_view, partition_places

__all__ = [
    "IPGeolocationSource",
    "LocationPermissionError",
    "MapView",
    "PlacesServiceError",
    "QUICK_LINKS",
    "ShellController",
    "StaticGeolocationSource",
    "build_geolocation_source",
    "build_results_view",
    "map_markers",
    "partition_places",
    "pin_style",
    "search",
]
