"""
FastAPI Server for the Facebook Events Extractor

Provides API endpoints for:
- Running an event search around a location
- Reading the response schema
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import API_HOST, API_PORT, DEFAULT_API_VERSION, DEFAULT_DISTANCE, DEFAULT_MAX_EXTRA_ROUNDS
from .exceptions import EventSearchError
from .extractor import EventSearch

logger = logging.getLogger(__name__)


# FastAPI app
app = FastAPI(title="Facebook Events Extractor API")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Models
class SearchRequest(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    distance: Optional[int] = DEFAULT_DISTANCE
    accessToken: Optional[str] = None  # Falls back to FEBL_ACCESS_TOKEN
    query: Optional[str] = None
    sort: Optional[str] = None
    version: Optional[str] = DEFAULT_API_VERSION
    maxExtraRounds: Optional[int] = DEFAULT_MAX_EXTRA_ROUNDS


def error_status(error: EventSearchError) -> int:
    """HTTP status for an EventSearchError: bad input is 400, upstream failures 502."""
    if error.code in (1, 2):
        return 400
    return 502


# API Endpoints
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/schema")
async def get_schema():
    """JSON schema of the /api/search response."""
    return EventSearch().get_schema()


@app.post("/api/search")
async def search_events(request: SearchRequest):
    """Search events hosted by venues around a location."""
    search = EventSearch.from_options(request.model_dump())
    try:
        result = await search.search()
    except EventSearchError as e:
        logger.warning("Search failed (%s): %s", e.code, e.message)
        raise HTTPException(status_code=error_status(e), detail=e.to_dict())

    return result.to_dict()


def run_server(host: str = API_HOST, port: int = API_PORT):
    """Run the API server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
