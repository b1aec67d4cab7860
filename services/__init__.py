"""
Service layer - the review workflow on top of the repository.

Usage:
    from services import build_system

    system = build_system()
    system.users.register_student(...)
    system.papers.submit_paper(...)
    system.reviews.submit_review(...)

Dependencies run one way: users <- papers <- reviews.
"""

from datetime import datetime
from typing import Callable

from config import Settings, load_settings
from models import new_id
from repositories import Repository, configure_backend, get_repository
from .users import UNKNOWN_USER, UserDirectory
from .papers import PaperLifecycle
from .reviews import ReviewLedger


class ReviewSystem:
    """The three services wired onto one repository."""

    def __init__(
        self,
        repo: Repository,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_id,
    ):
        self.repo = repo
        self.users = UserDirectory(repo.users, id_factory=id_factory)
        self.papers = PaperLifecycle(repo.papers, self.users, clock=clock, id_factory=id_factory)
        self.reviews = ReviewLedger(repo.reviews, self.papers, self.users,
                                    clock=clock, id_factory=id_factory)


def build_system(settings: Settings = None) -> ReviewSystem:
    """Configure the backend from settings and bootstrap the default admin."""
    settings = settings or load_settings()
    configure_backend(settings.backend, base_path=settings.data_dir)
    system = ReviewSystem(get_repository())

    admin = settings.default_admin
    if system.users.ensure_default_admin(admin.name, admin.email, admin.password, admin.admin_level):
        print(f"[System] Default admin created: {admin.email}")
    return system


__all__ = [
    "ReviewSystem",
    "build_system",
    "UserDirectory",
    "PaperLifecycle",
    "ReviewLedger",
    "UNKNOWN_USER",
]
