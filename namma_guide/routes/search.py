"""
FastAPI routes for the search flow.

Endpoints:
- POST /search: Run a search (input box, quick link, or "search this area")
- GET /state: Current view state and partitioned results
"""

import logging

from fastapi import APIRouter, Depends

from namma_guide.dependencies import get_shell
from namma_guide.schemas.shell import SearchRequest, ShellStateResponse
from namma_guide.services.shell import ShellController
from namma_guide.utils.logging import truncate_query

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=ShellStateResponse,
    status_code=200,
    summary="Search for places",
    description="""
    Runs one search and returns the resulting view state.

    **Frontend Flow:**
    1. User types a query and presses Enter / Search, or picks a quick link
    2. POST /search with query_text
    3. After panning the map, "Search this area" posts the same query_text
       with use_map_center=true

    **Behavior:**
    - Empty or whitespace-only queries are ignored (state returned unchanged)
    - Upstream failures are reported in state.error_message with a generic text
    - results.mode tells the UI whether to show place sections or citations
    """
)
async def search_endpoint(
    request: SearchRequest,
    shell: ShellController = Depends(get_shell),
) -> ShellStateResponse:
    logger.info(
        f"POST /search called, query_text='{truncate_query(request.query_text)}', "
        f"use_map_center={request.use_map_center}"
    )

    await shell.search(request.query_text, use_map_center=request.use_map_center)

    response = shell.snapshot()
    logger.info(
        f"Returning state with error={'yes' if response.state.error_message else 'no'}, "
        f"results_mode={response.results.mode if response.results else 'none'}"
    )
    return response


@router.get(
    "/state",
    response_model=ShellStateResponse,
    summary="Current view state",
)
async def state_endpoint(
    shell: ShellController = Depends(get_shell),
) -> ShellStateResponse:
    return shell.snapshot()
