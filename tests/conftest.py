"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, no I/O, in-memory stores
- integration/ Component boundaries, real I/O to temp locations

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import datetime, timedelta

from repositories import MemoryRepository
from services import ReviewSystem


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")


class StepClock:
    """Deterministic clock: each call is one minute after the last."""

    def __init__(self, start: datetime):
        self._now = start

    def __call__(self) -> datetime:
        current = self._now
        self._now += timedelta(minutes=1)
        return current


@pytest.fixture
def clock():
    return StepClock(datetime(2024, 1, 15, 12, 0, 0))


@pytest.fixture
def system(clock):
    """Fresh review system over in-memory stores."""
    return ReviewSystem(MemoryRepository(), clock=clock)


@pytest.fixture
def people(system):
    """Registered student, faculty, second faculty and admin, keyed by role."""
    users = system.users
    student_id = users.register_student("Sam Student", "s@x.edu", "pw-s", "CS", "S-001").value
    faculty_id = users.register_faculty("Fay Faculty", "f@x.edu", "pw-f", "CS", "Professor").value
    other_id = users.register_faculty("Gus Faculty", "g@x.edu", "pw-g", "Math", "Lecturer").value
    admin_id = users.register_admin("Ada Admin", "a@x.edu", "pw-a", "System Admin").value
    return {
        "student": users.find_by_id(student_id),
        "faculty": users.find_by_id(faculty_id),
        "other": users.find_by_id(other_id),
        "admin": users.find_by_id(admin_id),
    }


@pytest.fixture
def paper_id(system, people):
    """A PENDING paper written by the student."""
    outcome = system.papers.submit_paper(
        "Graph Algorithms",
        "Shortest paths revisited",
        "Full text",
        people["student"].user_id,
        ["Graphs", "Algorithms"],
    )
    assert outcome
    return outcome.value
