"""FastAPI application for the chatmod moderation service.

Provides REST API endpoints wrapping the chatmod Python package for:
- Evaluating messages against the moderation pipeline
- Inspecting per-sender moderation state and analytics
- Toggling moderation features at runtime
- Sending moderated messages to an in-memory channel
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the chatmod package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatmod import __version__
from chatmod.log import configure_logging
from web.backend.app.routers import chat, moderation

configure_logging()

app = FastAPI(
    title="chatmod API",
    description=(
        "REST API for chat auto-moderation. "
        "Provides endpoints for message evaluation, sender state, "
        "feature toggles, analytics, and moderated sending."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(moderation.router)
app.include_router(chat.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "chatmod API",
        "version": __version__,
        "description": "Chat auto-moderation REST API",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
