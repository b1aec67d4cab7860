"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (no external dependencies)
- Deterministic (same result every time)
"""

import pytest
from datetime import datetime


@pytest.fixture
def fixed_time():
    """Fixed datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def student_data():
    """Raw student record."""
    return {
        "kind": "student",
        "name": "Sam Student",
        "email": "s@x.edu",
        "credential": "pw-s",
        "department": "CS",
        "student_id": "S-001",
    }


@pytest.fixture
def paper_data(fixed_time):
    """Raw paper record."""
    return {
        "title": "Graph Algorithms",
        "abstract_text": "Shortest paths revisited",
        "content": "Full text",
        "author_id": "author-1",
        "author_name": "Sam Student",
        "submission_date": fixed_time,
        "keywords": ["Graphs", "Algorithms"],
    }


@pytest.fixture
def review_data(fixed_time):
    """Raw review record."""
    return {
        "paper_id": "paper-1",
        "reviewer_id": "reviewer-1",
        "reviewer_name": "Fay Faculty",
        "rating": 4,
        "comments": "Solid",
        "submission_date": fixed_time,
    }
