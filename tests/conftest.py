"""Shared fixtures for prism_router tests."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures" / "routes"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample route modules."""
    return FIXTURES


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
