"""
Pytest configuration and fixtures for homebrew-srd tests.
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing homebrew_srd
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# The server module creates its storage at import; keep it out of the working tree.
os.environ.setdefault("HOMEBREW_STORAGE_DIR", tempfile.mkdtemp(prefix="homebrew-srd-tests-"))


@pytest.fixture
def temp_storage_dir(tmp_path: Path) -> Path:
    """Create a temporary storage directory for tests."""
    storage_dir = tmp_path / "test_storage"
    storage_dir.mkdir()
    return storage_dir
