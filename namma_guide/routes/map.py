"""
FastAPI routes for the map surface.

Endpoints:
- GET /map: folium map document for the current state (loaded in an iframe)
- POST /map/move: pan/zoom report sent by the map document
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from namma_guide.dependencies import get_shell
from namma_guide.schemas.places import GeoPoint
from namma_guide.schemas.shell import MapMoveRequest, ShellStateResponse
from namma_guide.services.shell import ShellController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map", tags=["map"])


@router.get(
    "",
    response_class=HTMLResponse,
    summary="Render the map",
    description="Map centred on state.map_center with one pin per place of the current result.",
)
async def map_endpoint(
    shell: ShellController = Depends(get_shell),
) -> HTMLResponse:
    return HTMLResponse(content=shell.render_map_html())


@router.post(
    "/move",
    response_model=ShellStateResponse,
    status_code=200,
    summary="Report a pan or zoom",
    description="""
    Called by the map document on dragend and zoomend with the new visual centre.

    Sets state.map_was_panned so the page shows "Search this area".
    Never starts a search by itself.
    """
)
async def map_move_endpoint(
    request: MapMoveRequest,
    shell: ShellController = Depends(get_shell),
) -> ShellStateResponse:
    logger.debug(f"POST /map/move called, zoom={request.zoom}")

    shell.map_view.notify_moved(
        GeoPoint(latitude=request.latitude, longitude=request.longitude),
        zoom=request.zoom,
    )
    return shell.snapshot()
