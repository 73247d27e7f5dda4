"""
Pydantic schemas for the Application Shell.

ViewState is the single state struct owned by ShellController. The request
models define what the UI may send; ShellStateResponse is what every shell
endpoint returns so the page can re-render from one payload.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from namma_guide.schemas.places import Citation, GeoPoint, Place, SearchResult

GeolocationStatus = Literal["idle", "loading", "success", "error"]


class ViewState(BaseModel):
    """
    All view state of the shell.

    Invariants:
    - error_message is only set after a search finished loading
    - map_was_panned is False right after a search starts
    """
    query_text: str = ""
    loading: bool = False
    error_message: Optional[str] = None
    geolocation_status: GeolocationStatus = "idle"
    device_location: Optional[GeoPoint] = None
    map_center: GeoPoint
    map_was_panned: bool = False
    current_result: Optional[SearchResult] = None


class ResultsView(BaseModel):
    """
    How a SearchResult is laid out on the page.

    - places: structured places exist, split into main recommendations and attractions
    - citations: no structured places, flat list of grounding citations instead
    - empty: prose only
    """
    mode: Literal["places", "citations", "empty"]
    main_places: List[Place] = Field(default_factory=list)
    attractions: List[Place] = Field(default_factory=list)
    citations: List[Citation] = Field(default_factory=list)


class QuickLink(BaseModel):
    """Preset search shown under the search box."""
    label: str = Field(..., examples=["Cheap PGs"])
    query: str = Field(..., examples=["affordable and safe PG accommodations"])
    icon: str = Field(..., description="Icon key used by the template", examples=["home"])


# ============================================================================
# REQUEST MODELS
# ============================================================================

class SearchRequest(BaseModel):
    """
    Trigger a search from the shell.

    Frontend scenarios:
    - Submit button or Enter key: query_text from the input box
    - Quick link: query_text from the preset
    - "Search this area": same query_text with use_map_center=True

    Empty or whitespace-only queries are accepted and ignored.
    """
    query_text: str = Field(
        ...,
        description="What the user is looking for",
        max_length=1000,
        examples=["cheap PG in Koramangala"]
    )
    use_map_center: bool = Field(
        False,
        description="Search around the current map centre instead of the device location"
    )


class MapMoveRequest(BaseModel):
    """Pan/zoom report from the map surface."""
    latitude: float = Field(..., ge=-90, le=90, examples=[12.9352])
    longitude: float = Field(..., ge=-180, le=180, examples=[77.6245])
    zoom: Optional[int] = Field(None, ge=0, le=22, examples=[14])


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ShellStateResponse(BaseModel):
    """Current view state plus the partitioned results for rendering."""
    state: ViewState
    results: Optional[ResultsView] = Field(
        None,
        description="Present whenever state.current_result is set"
    )
