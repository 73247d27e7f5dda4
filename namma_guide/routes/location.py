"""
FastAPI routes for device location.

Endpoints:
- POST /location/retry: "Enable Location" after a denied or failed lookup
"""

import logging

from fastapi import APIRouter, Depends

from namma_guide.dependencies import get_shell
from namma_guide.schemas.shell import ShellStateResponse
from namma_guide.services.shell import ShellController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location", tags=["location"])


@router.post(
    "/retry",
    response_model=ShellStateResponse,
    status_code=200,
    summary="Re-attempt geolocation",
    description="""
    Re-runs location acquisition and waits for the outcome.

    state.geolocation_status ends as "success" (device_location set, map
    recentred) or "error" (the page keeps showing "Enable Location").
    Searches keep working without a location either way.
    """
)
async def retry_location_endpoint(
    shell: ShellController = Depends(get_shell),
) -> ShellStateResponse:
    logger.info("POST /location/retry called")

    await shell.retry_location()

    response = shell.snapshot()
    logger.info(f"Geolocation status after retry: {response.state.geolocation_status}")
    return response
