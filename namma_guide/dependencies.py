"""
FastAPI dependencies shared by the routers.

The app runs a single ShellController (no multi-user state). It is created by
the lifespan hook in main.py and stored on app.state; tests replace it through
app.dependency_overrides[get_shell].
"""

from fastapi import HTTPException, Request, status

from namma_guide.services.shell import ShellController


def get_shell(request: Request) -> ShellController:
    shell = getattr(request.app.state, "shell", None)
    if shell is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application shell is not mounted yet",
        )
    return shell
