"""
Lessons site entry point.

Serves the lesson listing, lesson pages and JSON API with FastAPI, or
exports every page as static HTML.

Run with: python main.py [--port PORT] [--export DIR]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Set up import paths before any local imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config import (
    get_allowed_origins,
    get_api_port,
    get_lessons_dir,
    get_sentry_dsn,
    is_dev_mode,
)
from core.lessons import get_available_lessons
from web_api.pages import STATIC_DIR
from web_api.routes.lessons import router as lessons_router
from web_api.routes.pages import router as pages_router

logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """Enable error reporting when SENTRY_DSN is configured."""
    dsn = get_sentry_dsn()
    if not dsn:
        return
    sentry_sdk.init(
        dsn=dsn,
        environment="development" if is_dev_mode() else "production",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report where lessons are read from; content itself is re-read per request."""
    lessons_dir = get_lessons_dir()
    print(f"Serving {len(get_available_lessons())} lessons from {lessons_dir}")
    yield
    print("Shutting down")


init_sentry()

app = FastAPI(
    title="Lessons Site",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(lessons_router)
app.include_router(pages_router)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/api/status")
async def api_status():
    """API status endpoint."""
    return {"status": "ok"}


@app.get("/health")
async def health():
    """Health check endpoint with lesson count."""
    return {
        "status": "healthy",
        "lessons": len(get_available_lessons()),
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Lessons Site Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: API_PORT or 8000)",
    )
    parser.add_argument(
        "--export",
        metavar="DIR",
        type=Path,
        help="Write the site as static HTML into DIR instead of serving it",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (sets DEV_MODE=true)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.dev else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Set env var so it persists across uvicorn reloads
    if args.dev:
        os.environ["DEV_MODE"] = "true"

    if args.export:
        from web_api.export import export_site

        pages = export_site(args.export)
        print(f"Wrote {len(pages)} pages to {args.export}")
        sys.exit(0)

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
