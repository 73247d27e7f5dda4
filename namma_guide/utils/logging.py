"""
Logging helpers for the Namma Bengaluru Guide backend.

Modules log through `logging.getLogger(__name__)`; handlers and format are
set once by `logging.basicConfig` in main.py.

RULES:
- NEVER log the Gemini API key or any credential
- NEVER log full user queries (truncate to 50 characters)
- NEVER log precise device coordinates at INFO level (DEBUG only)
"""


def truncate_query(query: str, limit: int = 50) -> str:
    """Shorten a user query for log lines."""
    if len(query) <= limit:
        return query
    return f"{query[:limit]}..."
