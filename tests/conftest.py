"""Root test configuration: per-test log sink reset and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest
from loguru import logger


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["chatsaver.db", "test.db"]
_CLEANUP_DIRS = ["exports"]


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop loguru sinks added by a test so none outlive the stream they write to."""
    yield
    logger.remove()


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and export directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
