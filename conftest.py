"""Root pytest configuration."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)


@pytest.fixture(autouse=True)
def default_site_settings(monkeypatch):
    """Tests see the built-in site title/description, not local overrides."""
    monkeypatch.delenv("SITE_TITLE", raising=False)
    monkeypatch.delenv("SITE_DESCRIPTION", raising=False)
