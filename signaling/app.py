from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .connections import ConnectionManager
from .constants import CORS_ORIGINS, STATIC_DIR
from .logging_config import get_logger
from .registry import RoomRegistry
from .relay import SessionRelay
from .routers import pages as pages_router
from .routers import rooms as rooms_router
from .routers import websockets as ws_router

logger = get_logger(__name__)


def create_app(registry: Optional[RoomRegistry] = None) -> FastAPI:
    """Build the application with its own registry, connection table and relay."""
    app = FastAPI(title="WebRTC Signaling Relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------
    # Runtime state
    # -----------------------------

    app.state.registry = registry if registry is not None else RoomRegistry()
    app.state.connections = ConnectionManager()
    app.state.relay = SessionRelay(app.state.registry, app.state.connections)

    # Register routers
    app.include_router(rooms_router.router)
    app.include_router(ws_router.router)
    app.include_router(pages_router.router)

    # -----------------------------
    # Static file mounting
    # -----------------------------

    # Scripts, styles and other assets next to the entry pages. Mounted last
    # so the routes above take precedence.
    if os.path.isdir(STATIC_DIR):
        app.mount("/", StaticFiles(directory=STATIC_DIR), name="static")
    else:
        logger.warning(f"Static directory {STATIC_DIR!r} not found; serving API only")

    return app


app = create_app()

__all__ = ["app", "create_app"]
