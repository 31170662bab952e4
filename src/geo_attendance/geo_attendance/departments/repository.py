from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, DepartmentPolicy


class DepartmentPolicyRepository(Protocol):
    def get_for_department(self, dept_id: int) -> Optional[DepartmentPolicy]:
        raise NotImplementedError

    def list_departments(self) -> Sequence[Department]:
        raise NotImplementedError
