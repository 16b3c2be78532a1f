"""
Centralized configuration for the lessons site.

All settings come from environment variables (loaded from .env.local / .env
by main.py and the root conftest.py), with sensible local defaults.
"""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_LESSONS_DIR = PROJECT_ROOT / "educational_content" / "lessons"


def is_dev_mode() -> bool:
    """Check if running in development mode (--dev flag or DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_lessons_dir() -> Path:
    """Directory holding the lesson markdown files.

    Relative LESSONS_DIR values are resolved against the project root.
    """
    value = os.getenv("LESSONS_DIR")
    if not value:
        return DEFAULT_LESSONS_DIR
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def get_site_title() -> str:
    return os.getenv("SITE_TITLE", "Nervos CKB Lessons")


def get_site_description() -> str:
    return os.getenv(
        "SITE_DESCRIPTION",
        "Learn blockchain fundamentals and CKB concepts step by step.",
    )


def get_sentry_dsn() -> str | None:
    """Sentry DSN, or None when error reporting is disabled."""
    return os.getenv("SENTRY_DSN") or None


def get_allowed_origins() -> list[str]:
    """
    Get list of allowed CORS origins.

    Includes localhost variants for dev plus the FRONTEND_URL env var if set.
    """
    ports = [get_api_port(), 3000]
    hosts = ["localhost", "127.0.0.1"]
    origins = [f"http://{host}:{port}" for host in hosts for port in ports]

    env_frontend = os.environ.get("FRONTEND_URL")
    if env_frontend and env_frontend.rstrip("/") not in origins:
        origins.append(env_frontend.rstrip("/"))

    return origins
