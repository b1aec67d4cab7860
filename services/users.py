"""
User directory - registration, login and user lookups.
"""

from typing import Callable, Optional

from models import Admin, Faculty, Outcome, Student, UserBase, new_id
from repositories import EntityStore

UNKNOWN_USER = "Unknown"


class UserDirectory:
    """
    Registration and lookup of users on top of a user store.

    Emails are unique at registration time (exact, case-sensitive match).
    Deleting a user does not touch their papers or reviews; dangling ids
    show up as "Unknown" through display_name().
    """

    def __init__(self, store: EntityStore[UserBase], id_factory: Callable[[], str] = new_id):
        self._store = store
        self._new_id = id_factory

    # === Registration ===

    def _register(self, user: UserBase) -> Outcome:
        with self._store.locked():
            if self.find_by_email(user.email) is not None:
                return Outcome.conflict(f"Email {user.email} is already registered")
            if not self._store.save(user):
                return Outcome.conflict(f"User {user.email} already exists")
        print(f"[Users] Registered {user.role} {user.email}")
        return Outcome.success(user.user_id)

    def register_student(self, name: str, email: str, password: str,
                         department: str, student_id: str) -> Outcome:
        """Register a new student."""
        return self._register(Student(
            user_id=self._new_id(), name=name, email=email, credential=password,
            department=department, student_id=student_id,
        ))

    def register_faculty(self, name: str, email: str, password: str,
                         department: str, position: str, is_reviewer: bool = True) -> Outcome:
        """Register a new faculty member."""
        return self._register(Faculty(
            user_id=self._new_id(), name=name, email=email, credential=password,
            department=department, position=position, is_reviewer=is_reviewer,
        ))

    def register_admin(self, name: str, email: str, password: str, admin_level: str) -> Outcome:
        """Register a new admin."""
        return self._register(Admin(
            user_id=self._new_id(), name=name, email=email, credential=password,
            admin_level=admin_level,
        ))

    def ensure_default_admin(self, name: str, email: str, password: str,
                             admin_level: str) -> Outcome:
        """Create the bootstrap admin, unless some admin already exists."""
        if self.get_admins():
            return Outcome.conflict("An admin account already exists")
        return self.register_admin(name, email, password, admin_level)

    # === Authentication ===

    def login(self, email: str, password: str) -> Optional[UserBase]:
        """Return the user if the email exists and the password matches."""
        user = self.find_by_email(email)
        if user is not None and user.verify_password(password):
            return user
        return None

    # === Lookups ===

    def find_by_email(self, email: str) -> Optional[UserBase]:
        for user in self._store.find_all():
            if user.email == email:
                return user
        return None

    def find_by_id(self, user_id: str) -> Optional[UserBase]:
        return self._store.find_by_id(user_id)

    def get_all(self) -> list[UserBase]:
        return self._store.find_all()

    def get_students(self) -> list[Student]:
        return [u for u in self.get_all() if isinstance(u, Student)]

    def get_faculty(self) -> list[Faculty]:
        return [u for u in self.get_all() if isinstance(u, Faculty)]

    def get_admins(self) -> list[Admin]:
        return [u for u in self.get_all() if isinstance(u, Admin)]

    def display_name(self, user_id: str) -> str:
        """Name for display; ids of deleted users resolve to "Unknown"."""
        user = self.find_by_id(user_id)
        return user.name if user else UNKNOWN_USER

    # === Updates ===

    def update_user(self, user: UserBase) -> Outcome:
        if not self._store.update(user):
            return Outcome.not_found(f"User {user.user_id} not found")
        return Outcome.success(user.user_id)

    def change_name(self, user_id: str, name: str) -> Outcome:
        with self._store.locked():
            user = self.find_by_id(user_id)
            if user is None:
                return Outcome.not_found(f"User {user_id} not found")
            user.rename(name)
            return self.update_user(user)

    def change_password(self, user_id: str, new_password: str) -> Outcome:
        with self._store.locked():
            user = self.find_by_id(user_id)
            if user is None:
                return Outcome.not_found(f"User {user_id} not found")
            user.set_password(new_password)
            return self.update_user(user)

    def delete_user(self, user_id: str, acting_user: Optional[UserBase] = None) -> Outcome:
        """
        Remove a user. No cascade to papers or reviews.

        When acting_user is given it must be an admin, and may not delete
        its own account.
        """
        if acting_user is not None:
            if not acting_user.is_admin:
                return Outcome.forbidden("Only admins can delete users")
            if acting_user.user_id == user_id:
                return Outcome.conflict("You cannot delete your own account")

        if not self._store.delete_by_id(user_id):
            return Outcome.not_found(f"User {user_id} not found")
        print(f"[Users] Deleted {user_id}")
        return Outcome.success(user_id)
