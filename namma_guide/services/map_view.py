"""
Map View - folium (Leaflet) rendering of search results.

Renders an OpenStreetMap tile map centred on a coordinate, drops one
category-coloured teardrop pin per place, and reports pan/zoom back to its
owner. The Map View holds no query state and makes no network calls; the only
state it keeps is the surface's current centre and zoom.
"""

import html
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import folium
from branca.element import MacroElement
from jinja2 import Template

from namma_guide.schemas.places import GOOGLE_MAPS_SEARCH_URL, GeoPoint, Place, PlaceCategory

logger = logging.getLogger(__name__)

OSM_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)

DEFAULT_ZOOM = 13
MIN_ZOOM = 0
MAX_ZOOM = 19

PIN_WIDTH = 36
PIN_HEIGHT = 48


@dataclass(frozen=True)
class PinStyle:
    color: str
    glyph_svg: str


# 20x20 white glyphs drawn inside the pin head
_HOME_GLYPH = '<path d="M3 10 L10 3 L17 10 V17 H12 V12 H8 V17 H3 Z" fill="white"/>'
_COFFEE_GLYPH = (
    '<path d="M3 7 H14 V12 A5 5 0 0 1 9 17 H8 A5 5 0 0 1 3 12 Z" fill="white"/>'
    '<path d="M14 8 H16 A2 2 0 0 1 16 12 H14" fill="none" stroke="white" stroke-width="1.5"/>'
)
_UTENSILS_GLYPH = (
    '<path d="M6 2 V18 M4 2 V7 A2 2 0 0 0 8 7 V2 M14 2 C12 4 12 9 14 10 V18" '
    'fill="none" stroke="white" stroke-width="1.6" stroke-linecap="round"/>'
)
_LANDMARK_GLYPH = (
    '<path d="M2 8 L10 3 L18 8 Z M4 9 H6 V15 H4 Z M9 9 H11 V15 H9 Z '
    'M14 9 H16 V15 H14 Z M2 16 H18 V18 H2 Z" fill="white"/>'
)
_PIN_GLYPH = '<circle cx="10" cy="9" r="4" fill="white"/>'

PIN_STYLES: Dict[PlaceCategory, PinStyle] = {
    PlaceCategory.PG: PinStyle("#2563eb", _HOME_GLYPH),              # blue
    PlaceCategory.HOTEL: PinStyle("#059669", _COFFEE_GLYPH),         # emerald
    PlaceCategory.RESTAURANT: PinStyle("#ea580c", _UTENSILS_GLYPH),  # orange
    PlaceCategory.ATTRACTION: PinStyle("#9333ea", _LANDMARK_GLYPH),  # purple
    PlaceCategory.OTHER: PinStyle("#6b7280", _PIN_GLYPH),            # gray
}


def pin_style(category: PlaceCategory) -> PinStyle:
    return PIN_STYLES.get(category, PIN_STYLES[PlaceCategory.OTHER])


def pin_icon_html(category: PlaceCategory) -> str:
    """Teardrop marker in the category colour with the glyph inset in its head."""
    style = pin_style(category)
    return (
        f'<div class="marker-container" style="position: relative; width: {PIN_WIDTH}px; '
        f'height: {PIN_HEIGHT}px;">'
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 36 48" width="{PIN_WIDTH}" '
        f'height="{PIN_HEIGHT}" style="position: absolute; top: 0; left: 0; '
        f'filter: drop-shadow(0px 4px 6px rgba(0,0,0,0.3));">'
        f'<path d="M18 0C8.06 0 0 8.06 0 18c0 13.5 18 30 18 30s18-16.5 18-30C36 8.06 27.94 0 18 0z" '
        f'fill="{style.color}" stroke="white" stroke-width="2.5"/>'
        f'</svg>'
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20" width="20" height="20" '
        f'style="position: absolute; top: 8px; left: 8px;">{style.glyph_svg}</svg>'
        f'</div>'
    )


def build_pin_icon(category: PlaceCategory) -> folium.DivIcon:
    return folium.DivIcon(
        html=pin_icon_html(category),
        icon_size=(PIN_WIDTH, PIN_HEIGHT),
        icon_anchor=(PIN_WIDTH // 2, PIN_HEIGHT),
        popup_anchor=(0, -PIN_HEIGHT),
        class_name="custom-icon",
    )


@dataclass(frozen=True)
class MapMarker:
    name: str
    lat: float
    lng: float
    category: PlaceCategory
    description: str = ""

    @property
    def maps_url(self) -> str:
        return GOOGLE_MAPS_SEARCH_URL.format(lat=self.lat, lng=self.lng)


def map_markers(places: Sequence[Place]) -> List[MapMarker]:
    """Markers for the places that can be pinned. Others are skipped silently."""
    return [
        MapMarker(
            name=place.name,
            lat=place.lat,
            lng=place.lng,
            category=place.category,
            description=place.description,
        )
        for place in places
        if place.has_valid_coordinates
    ]


def escape_model_text(text: str) -> str:
    """
    Escape model-written text for popups and tooltips.

    folium embeds both in JS template literals, so backticks and `$` are
    escaped on top of the usual HTML characters.
    """
    return html.escape(text, quote=True).replace("`", "&#96;").replace("$", "&#36;")


def tooltip_html(name: str) -> str:
    return escape_model_text(name)


def popup_html(marker: MapMarker) -> str:
    name = escape_model_text(marker.name)
    category = html.escape(marker.category.value)
    description = escape_model_text(marker.description)
    link = html.escape(marker.maps_url, quote=True)
    return (
        f'<div style="font-family: sans-serif; min-width: 200px;">'
        f'<h3 style="margin: 0 0 4px; font-size: 16px;">{name}</h3>'
        f'<span style="display: inline-block; padding: 1px 8px; border-radius: 999px; '
        f'background: #f5f5f4; font-size: 11px; text-transform: capitalize;">{category}</span>'
        f'<p style="font-size: 13px; margin: 8px 0;">{description}</p>'
        f'<a href="{link}" target="_blank" rel="noopener noreferrer">View on Google Maps</a>'
        f'</div>'
    )


class MapMoveReporter(MacroElement):
    """
    Posts the map's visual centre to the backend after a pan or a zoom, then
    tells the embedding page (the shell) that the map moved.
    """

    _template = Template("""
        {% macro script(this, kwargs) %}
        (function() {
            var map = {{ this._parent.get_name() }};
            function reportMove() {
                var center = map.getCenter().wrap();
                fetch({{ this.endpoint|tojson }}, {
                    method: "POST",
                    headers: {"Content-Type": "application/json"},
                    body: JSON.stringify({
                        latitude: center.lat,
                        longitude: center.lng,
                        zoom: map.getZoom()
                    })
                }).then(function(response) {
                    if (response.ok && window.parent && window.parent !== window) {
                        window.parent.postMessage({type: "map-moved"}, "*");
                    }
                });
            }
            map.on("dragend", reportMove);
            map.on("zoomend", reportMove);
        })();
        {% endmacro %}
    """)

    def __init__(self, endpoint: str):
        super().__init__()
        self._name = "MapMoveReporter"
        self.endpoint = endpoint


class MapView:
    """
    Owns the map surface for one shell.

    `on_map_move` is called with the new visual centre whenever the user pans
    or zooms; both gestures are reported the same way.
    """

    def __init__(
        self,
        on_map_move: Callable[[GeoPoint], None],
        zoom: int = DEFAULT_ZOOM,
        move_endpoint: str = "/map/move",
    ):
        self._on_map_move = on_map_move
        self._zoom = zoom
        self._center: Optional[GeoPoint] = None
        self.move_endpoint = move_endpoint

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def center(self) -> Optional[GeoPoint]:
        return self._center

    def reconcile_center(self, center: GeoPoint) -> bool:
        """Re-centre the surface if `center` changed. Zoom is kept."""
        if self._center == center:
            return False
        self._center = center
        return True

    def render(self, places: Sequence[Place], center: GeoPoint) -> folium.Map:
        self.reconcile_center(center)

        fmap = folium.Map(
            location=[center.latitude, center.longitude],
            zoom_start=self._zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles=OSM_TILE_URL,
            attr=OSM_ATTRIBUTION,
            name="OpenStreetMap",
            max_zoom=MAX_ZOOM,
        ).add_to(fmap)

        markers = map_markers(places)
        for marker in markers:
            folium.Marker(
                location=[marker.lat, marker.lng],
                icon=build_pin_icon(marker.category),
                popup=folium.Popup(popup_html(marker), max_width=300),
                tooltip=folium.Tooltip(tooltip_html(marker.name)),
            ).add_to(fmap)

        MapMoveReporter(self.move_endpoint).add_to(fmap)

        logger.debug(f"Rendered map with {len(markers)} of {len(places)} places pinned")
        return fmap

    def render_html(self, places: Sequence[Place], center: GeoPoint) -> str:
        """Standalone HTML document for the map iframe."""
        return self.render(places, center).get_root().render()

    def notify_moved(self, center: GeoPoint, zoom: Optional[int] = None) -> None:
        """Surface reported a pan or zoom."""
        if zoom is not None:
            self._zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        self._center = center
        self._on_map_move(center)
