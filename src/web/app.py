"""
FastAPI application factory for Swipe Counter.

Routes:
- /api/counters, /api/active, /api/editor/* -> collection CRUD and edit forms
- /api/gestures, /api/pointer -> gesture input
- /api/health -> liveness summary

The app holds no module-level state: the RuntimeContext is passed in and
kept on app.state, so tests can build as many independent apps as needed.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from runtime.context import RuntimeContext
from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app around an already-built runtime context."""
    app = FastAPI(
        title="Swipe Counter",
        version="0.1.0",
        description="Gesture-driven bounded counters",
    )
    app.state.ctx = ctx

    # CORS for development (Vite dev server)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router, prefix="/api")
    return app
