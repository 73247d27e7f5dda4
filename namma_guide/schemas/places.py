"""
Pydantic schemas for the place search pipeline.

These models define the typed shapes that flow from the Query Service to the
Application Shell and the Map View: coordinates, structured places parsed out
of the model's narrative, grounding citations, and the search result itself.
"""

import math
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

# Outbound link template for a place pin or card
GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}"


class PlaceCategory(str, Enum):
    """Known place categories. Anything else the model emits becomes OTHER."""
    PG = "pg"
    HOTEL = "hotel"
    RESTAURANT = "restaurant"
    ATTRACTION = "attraction"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: object) -> "PlaceCategory":
        """Map a raw `type` value from the model output onto a category."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for category in cls:
                if category.value == normalized:
                    return category
        return cls.OTHER


def is_valid_coordinate_pair(lat: Optional[float], lng: Optional[float]) -> bool:
    """True when both values are present, finite, and inside the WGS84 range."""
    if lat is None or lng is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


class GeoPoint(BaseModel):
    """A latitude/longitude pair."""
    latitude: float = Field(
        ...,
        description="Latitude in decimal degrees",
        ge=-90,
        le=90,
        examples=[12.9716]
    )
    longitude: float = Field(
        ...,
        description="Longitude in decimal degrees",
        ge=-180,
        le=180,
        examples=[77.5946]
    )


class Place(BaseModel):
    """
    A structured recommendation parsed from the model's embedded JSON block.

    Coordinates are optional: the model sometimes omits them. Places without
    valid coordinates are still listed in the results but never pinned.
    """
    name: str = Field(
        ...,
        description="Display name of the place",
        min_length=1,
        examples=["Zolo Stays Koramangala"]
    )
    lat: Optional[float] = Field(
        None,
        description="Approximate latitude",
        examples=[12.9352]
    )
    lng: Optional[float] = Field(
        None,
        description="Approximate longitude",
        examples=[77.6245]
    )
    category: PlaceCategory = Field(
        PlaceCategory.OTHER,
        description="Place category, drives pin colour and result partition"
    )
    description: str = Field(
        "",
        description="Short description written by the model",
        examples=["Co-living PG with meals, popular with new joiners."]
    )

    @property
    def has_valid_coordinates(self) -> bool:
        return is_valid_coordinate_pair(self.lat, self.lng)

    @property
    def maps_url(self) -> Optional[str]:
        """Google Maps search link for this place, if it can be located."""
        if not self.has_valid_coordinates:
            return None
        return GOOGLE_MAPS_SEARCH_URL.format(lat=self.lat, lng=self.lng)


class Citation(BaseModel):
    """A grounding source returned alongside the prose."""
    title: str = Field(..., description="Source title", examples=["Zolo Stays"])
    uri: str = Field(..., description="Link to the source", examples=["https://maps.google.com/?cid=123"])


class SearchResult(BaseModel):
    """The unit returned by the Query Service for one query."""
    text: str = Field(
        "",
        description="Narrative prose with the structured block removed"
    )
    citations: List[Citation] = Field(
        default_factory=list,
        description="Grounding citations in upstream order"
    )
    places: List[Place] = Field(
        default_factory=list,
        description="Structured places in the order the model listed them"
    )

    def first_mappable_place(self) -> Optional[Place]:
        """First place that can be pinned on the map, if any."""
        for place in self.places:
            if place.has_valid_coordinates:
                return place
        return None


class PlaceBlockParse(BaseModel):
    """
    Outcome of parsing the structured block out of the model's narrative.

    - success: block found and every record accepted
    - partial: block decoded but at least one record was rejected
    - failure: block missing, undecodable, or not a JSON array
    """
    status: Literal["success", "partial", "failure"]
    places: List[Place] = Field(default_factory=list)
    rejected_count: int = 0
    failure_reason: Optional[Literal["missing_block", "malformed_json", "not_an_array"]] = None
