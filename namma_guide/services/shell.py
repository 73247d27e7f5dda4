"""
Application Shell - owner of all view state.

ShellController holds one ViewState and changes it only through the named
transitions below. It acquires the device location on mount, runs searches
through the Places Service, and turns Map View pan/zoom reports into the
"search this area" affordance.

Concurrency:
- Everything runs on the event loop; there are no worker threads.
- Geolocation acquisitions are last-writer-wins.
- Searches are numbered. When searches overlap, only the most recently started
  one may write its outcome; responses of older searches are dropped.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from namma_guide.schemas.places import GeoPoint, Place, PlaceCategory, SearchResult
from namma_guide.schemas.shell import QuickLink, ResultsView, ShellStateResponse, ViewState
from namma_guide.services.geolocation import GeolocationSource, LocationPermissionError
from namma_guide.services.map_view import DEFAULT_ZOOM, MapView
from namma_guide.services.places_service import PlacesServiceError
from namma_guide.utils.logging import truncate_query

logger = logging.getLogger(__name__)

SearchService = Callable[[str, Optional[GeoPoint]], Awaitable[SearchResult]]

QUICK_LINKS: List[QuickLink] = [
    QuickLink(label="Cheap PGs", query="affordable and safe PG accommodations", icon="home"),
    QuickLink(label="Budget Hotels", query="budget hotels for a short stay", icon="coffee"),
    QuickLink(label="Local Food", query="cheap and authentic local restaurants or darshinis", icon="utensils"),
    QuickLink(label="Transport Hubs", query="nearest metro stations or bus stops", icon="navigation"),
]


def partition_places(places: Sequence[Place]) -> Tuple[List[Place], List[Place]]:
    """Split places into (main recommendations, nearby attractions), keeping order."""
    main: List[Place] = []
    attractions: List[Place] = []
    for place in places:
        if place.category == PlaceCategory.ATTRACTION:
            attractions.append(place)
        else:
            main.append(place)
    return main, attractions


def build_results_view(result: SearchResult) -> ResultsView:
    """
    Choose how a result is laid out.

    Structured places win. The flat citation list is only shown when the model
    gave no structured places at all.
    """
    if result.places:
        main, attractions = partition_places(result.places)
        return ResultsView(mode="places", main_places=main, attractions=attractions)
    if result.citations:
        return ResultsView(mode="citations", citations=list(result.citations))
    return ResultsView(mode="empty")


class ShellController:
    """Single owner of ViewState for the running app."""

    def __init__(
        self,
        search_service: SearchService,
        geolocation_source: GeolocationSource,
        default_center: GeoPoint,
        default_zoom: int = DEFAULT_ZOOM,
    ):
        self._search_service = search_service
        self._geolocation = geolocation_source
        self._state = ViewState(map_center=default_center)
        self._search_generation = 0
        self._location_task: Optional[asyncio.Task] = None
        self.map_view = MapView(on_map_move=self.handle_map_move, zoom=default_zoom)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        """A copy of the current state. Mutate only through the controller."""
        return self._state.model_copy(deep=True)

    def snapshot(self) -> ShellStateResponse:
        state = self.state
        results = build_results_view(state.current_result) if state.current_result else None
        return ShellStateResponse(state=state, results=results)

    # ------------------------------------------------------------------
    # Geolocation
    # ------------------------------------------------------------------

    def mount(self) -> asyncio.Task:
        """
        Start location acquisition (idle -> loading) and return the pending task.

        Must be called from a running event loop.
        """
        self._begin_location_request()
        self._location_task = asyncio.create_task(self._resolve_location())
        return self._location_task

    async def acquire_location(self) -> None:
        """Acquire the device location and wait for the outcome."""
        self._begin_location_request()
        await self._resolve_location()

    async def retry_location(self) -> None:
        """'Enable Location': re-attempt acquisition after an error."""
        logger.info(f"Location retry requested (status={self._state.geolocation_status})")
        await self.acquire_location()

    async def shutdown(self) -> None:
        if self._location_task is not None and not self._location_task.done():
            self._location_task.cancel()
            try:
                await self._location_task
            except asyncio.CancelledError:
                pass

    async def _resolve_location(self) -> None:
        try:
            point = await self._geolocation.get_current_position()
        except LocationPermissionError as e:
            logger.warning(f"Error getting location: {e}")
            self._location_failed()
            return
        self._location_acquired(point)

    def _begin_location_request(self) -> None:
        self._state.geolocation_status = "loading"

    def _location_acquired(self, point: GeoPoint) -> None:
        self._state.device_location = point
        self._state.map_center = point
        self._state.geolocation_status = "success"
        logger.info("Geolocation acquired")

    def _location_failed(self) -> None:
        self._state.geolocation_status = "error"

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(self, query_text: str, use_map_center: bool = False) -> bool:
        """
        Run the search flow.

        Args:
            query_text: Query from the input box or a quick link
            use_map_center: True for "search this area"

        Returns:
            False when the query was ignored (empty), True otherwise.
        """
        if not query_text or not query_text.strip():
            logger.debug("Ignoring empty search")
            return False

        generation = self._begin_search(query_text)

        if use_map_center:
            location: Optional[GeoPoint] = self._state.map_center
        else:
            location = self._state.device_location

        logger.info(
            f"Search #{generation} started, query='{truncate_query(query_text)}', "
            f"use_map_center={use_map_center}, location={'provided' if location else 'none'}"
        )

        try:
            result = await self._search_service(query_text, location)
        except PlacesServiceError as e:
            if self._is_latest_search(generation):
                self._search_failed(e.message)
            else:
                logger.info(f"Discarding failure of stale search #{generation}")
        else:
            if self._is_latest_search(generation):
                self._search_succeeded(result)
            else:
                logger.info(f"Discarding result of stale search #{generation}")
        finally:
            if self._is_latest_search(generation):
                self._end_search()

        return True

    def _is_latest_search(self, generation: int) -> bool:
        return generation == self._search_generation

    def _begin_search(self, query_text: str) -> int:
        self._search_generation += 1
        self._state.query_text = query_text
        self._state.loading = True
        self._state.error_message = None
        self._state.current_result = None
        self._state.map_was_panned = False
        return self._search_generation

    def _search_succeeded(self, result: SearchResult) -> None:
        self._state.current_result = result
        first = result.first_mappable_place()
        if first is not None:
            self._state.map_center = GeoPoint(latitude=first.lat, longitude=first.lng)

    def _search_failed(self, message: str) -> None:
        self._state.error_message = message

    def _end_search(self) -> None:
        self._state.loading = False

    # ------------------------------------------------------------------
    # Map
    # ------------------------------------------------------------------

    def handle_map_move(self, center: GeoPoint) -> None:
        """Map View callback: the user panned or zoomed. Does not search."""
        self._state.map_center = center
        self._state.map_was_panned = True

    def render_map_html(self) -> str:
        places = self._state.current_result.places if self._state.current_result else []
        return self.map_view.render_html(places, self._state.map_center)
