"""
User - students, faculty and admins.

One shared record (id, name, email, credential) plus a per-variant payload,
discriminated on `kind`. Role is derived from the tag, never stored.
"""

import hmac
from typing import Annotated, Literal, Union
from pydantic import Field

from .base import BaseEntity, new_id


ROLE_NAMES = {
    "student": "Student",
    "faculty": "Faculty",
    "admin": "Admin",
}


class UserBase(BaseEntity):
    """Fields every user carries."""
    user_id: str = Field(default_factory=new_id, frozen=True)
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    credential: str = Field(repr=False)

    @property
    def entity_id(self) -> str:
        return self.user_id

    @property
    def role(self) -> str:
        return role_of(self)

    @property
    def is_admin(self) -> bool:
        return self.kind == "admin"

    def verify_password(self, secret: str) -> bool:
        """Compare a candidate secret against the stored credential."""
        if secret is None:
            return False
        return hmac.compare_digest(self.credential.encode(), secret.encode())

    def set_password(self, secret: str) -> None:
        self.credential = secret
        self.touch()

    def rename(self, name: str) -> None:
        self.name = name
        self.touch()


class Student(UserBase):
    kind: Literal["student"] = "student"
    department: str = ""
    student_id: str = ""


class Faculty(UserBase):
    kind: Literal["faculty"] = "faculty"
    department: str = ""
    position: str = ""  # e.g. "Associate Professor"
    is_reviewer: bool = True


class Admin(UserBase):
    kind: Literal["admin"] = "admin"
    admin_level: str = ""  # e.g. "System Admin", "Department Admin"


User = Annotated[Union[Student, Faculty, Admin], Field(discriminator="kind")]


def role_of(user: UserBase) -> str:
    """Human-readable role for a user variant."""
    return ROLE_NAMES[user.kind]
