"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from server.dependencies import close_orchestrator
from server.middleware import RequestIDMiddleware
from server.routes import health, search
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("Search API starting up")

    if not os.getenv("COMPLETION_ENDPOINT") and not os.getenv("COMPLETION_API_KEY"):
        logger.warning("No COMPLETION_ENDPOINT or COMPLETION_API_KEY set; using the default endpoint")

    yield

    await close_orchestrator()
    logger.info("Search API shutting down")


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="HK Search Assistant API",
        description="Retrieval-augmented search answers with model fallback",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes first so /api/* takes precedence over static files
    app.include_router(health.router)
    app.include_router(search.router)

    frontend_dir = os.getenv(
        "FRONTEND_DIR", os.path.join(os.path.dirname(os.path.dirname(__file__)), "frontend")
    )
    if os.path.isdir(frontend_dir):
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
    else:
        logger.debug(f"Frontend directory not found at {frontend_dir}; skipping static mount")

    return app
