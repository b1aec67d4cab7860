"""
Integration test fixtures.

These tests write real JSON files, always under a throwaway directory
that is removed afterwards.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from repositories import JsonRepository


@pytest.fixture
def temp_dir():
    """Scratch directory, removed after the test."""
    d = tempfile.mkdtemp(prefix="peer-review-")
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir):
    """Where users.json, papers.json and reviews.json get written."""
    p = temp_dir / "data"
    p.mkdir()
    return p


@pytest.fixture
def reload(data_dir):
    """Open a fresh JsonRepository on data_dir, as a restarted process would."""
    def _reload() -> JsonRepository:
        return JsonRepository(base_path=data_dir)
    return _reload
