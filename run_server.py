#!/usr/bin/env python
"""
Run the API Server

Starts the FastAPI server for event searches.

Usage:
    python run_server.py

The server runs on http://localhost:8000

Endpoints:
    GET  /api/health  - Health check
    GET  /api/schema  - Response schema
    POST /api/search  - Search events around a location
"""

import uvicorn

from fb_events_extractor.config import API_HOST, API_PORT

if __name__ == "__main__":
    uvicorn.run("fb_events_extractor.server:app", host=API_HOST, port=API_PORT, reload=False)
