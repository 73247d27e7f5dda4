"""
Server-rendered shell page.

GET / renders templates/index.html from the current ShellController snapshot.
The page talks back to the JSON endpoints with fetch() and reloads itself.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from namma_guide.dependencies import get_shell
from namma_guide.services.shell import QUICK_LINKS, ShellController

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    shell: ShellController = Depends(get_shell),
) -> HTMLResponse:
    snapshot = shell.snapshot()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "state": snapshot.state,
            "results": snapshot.results,
            "quick_links": QUICK_LINKS,
        },
    )
