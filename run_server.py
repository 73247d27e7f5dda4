"""
Start the Namma Bengaluru Guide backend locally.

Serves the shell page, the map document and the JSON API with auto-reload.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Namma Bengaluru Guide")
    print("=" * 60)
    print()
    print("📌 Endpoints:")
    print("   - Shell page:    GET  http://localhost:8000/")
    print("   - Search:        POST http://localhost:8000/search")
    print("   - View state:    GET  http://localhost:8000/state")
    print("   - Map document:  GET  http://localhost:8000/map")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/search" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"query_text": "cheap PG in Koramangala"}\'')
    print()
    print("🔑 Requires GEMINI_API_KEY in your environment or .env file")
    print("=" * 60)
    print()

    uvicorn.run(
        "namma_guide.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
