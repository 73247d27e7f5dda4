"""
FastAPI routers for all API endpoints.

Each module defines a router for one concern (search, location, map, UI, health).
Routers stay thin: they validate input, call the ShellController, and return
its snapshot.
"""
