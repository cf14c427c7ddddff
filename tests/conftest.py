"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
from pathlib import Path

# Set asyncio mode
pytest_plugins = ('pytest_asyncio',)

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hunkwise.utils.diff_utils.application.backend import DiffBackend, ImageBytes
from hunkwise.utils.diff_utils.core.exceptions import BackendError


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires a git executable)"
    )
    config.option.asyncio_mode = "auto"


class FakeBackend(DiffBackend):
    """In-memory backend that records every call."""

    def __init__(self, files=None, apply_error=None):
        self.files = dict(files or {})
        self.apply_error = apply_error
        self.applied = []
        self.resolved = {}

    def read_file(self, path):
        if path not in self.files:
            raise BackendError(f"No such file: {path}", details={"path": path})
        return self.files[path]

    def write_file(self, path, text):
        self.files[path] = text

    def apply_patch(self, patch_text, direction):
        if self.apply_error is not None:
            raise self.apply_error
        self.applied.append((patch_text, direction))

    def resolve_conflict(self, path, final_text):
        self.files[path] = final_text
        self.resolved[path] = final_text

    def get_image_bytes(self, path, revision):
        return ImageBytes()


@pytest.fixture
def fake_backend():
    """Create an empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def backend_factory():
    """Return the in-memory backend class for tests that need preloaded files or failures."""
    return FakeBackend
