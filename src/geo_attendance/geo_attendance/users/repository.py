from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees; services depend on this, not on MySQL."""

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError
