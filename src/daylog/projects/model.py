from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Project:
    """Domain entity: Project. Never deleted, only deactivated."""

    id: int
    name: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "isActive": self.is_active}
