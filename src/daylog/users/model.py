from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object; the username doubles as the display name.
    """

    id: int
    username: str
    password_hash: str
    role: Role = Role.EMPLOYEE

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role.value}
