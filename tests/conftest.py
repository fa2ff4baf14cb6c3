"""Pytest configuration and fixtures for kwindo tests."""

import logging
import sys
from pathlib import Path

import pytest

# Make the kwindo package importable without installation
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from kwindo.models import RenderContext  # noqa: E402

MARKER = "kwindo-test1234"


@pytest.fixture(autouse=True)
def reset_kwindo_logger():
    """The CLI attaches handlers to captured streams; drop them after each test."""
    yield
    logger = logging.getLogger("kwindo")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def marker() -> str:
    return MARKER


@pytest.fixture
def render_context() -> RenderContext:
    """KDE 6, no debug output."""
    return RenderContext(marker=MARKER)


@pytest.fixture
def debug_context() -> RenderContext:
    return RenderContext(marker=MARKER, debug=True)


@pytest.fixture
def kde5_context() -> RenderContext:
    return RenderContext(marker=MARKER, kde5=True)


@pytest.fixture
def make_journal():
    """Build journal text the way KWin logs script prints."""

    def _make(marker: str, *entries: str, prefix: str = "js: ") -> str:
        return "".join(f"{prefix}{marker} {entry}\n" for entry in entries)

    return _make
