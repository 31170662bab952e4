from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Who is checking in, and which department policy applies to them.

    Authentication happens upstream; this is a read-only view of the user row.
    """

    user_id: int
    full_name: str
    role: Role
    dept_id: Optional[int]
    dept_name: Optional[str] = None
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "role": self.role.value,
            "dept_id": self.dept_id,
            "dept_name": self.dept_name,
            "is_active": self.is_active,
        }
