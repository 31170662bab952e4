from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .model import Department, DepartmentPolicy
from .repository import DepartmentPolicyRepository


class SettingsDepartmentPolicyRepository(DepartmentPolicyRepository):
    """Policies declared in the settings module (DEPARTMENT_POLICIES), parsed once at startup.

    A policy under the key "default" applies to departments without their own entry.
    """

    def __init__(self, policies: Mapping[int, DepartmentPolicy], *, default: Optional[DepartmentPolicy] = None):
        self._policies = dict(policies)
        self._default = default

    @classmethod
    def from_settings(cls, raw: Mapping[Any, Mapping[str, Any]]) -> "SettingsDepartmentPolicyRepository":
        policies: dict[int, DepartmentPolicy] = {}
        default: Optional[DepartmentPolicy] = None
        for key, data in raw.items():
            if key == "default":
                default = DepartmentPolicy.from_mapping(data, dept_id=0)
                continue
            policy = DepartmentPolicy.from_mapping(data, dept_id=int(key))
            policies[policy.dept_id] = policy
        return cls(policies, default=default)

    def get_for_department(self, dept_id: int) -> Optional[DepartmentPolicy]:
        return self._policies.get(int(dept_id), self._default)

    def list_departments(self) -> Sequence[Department]:
        return [Department(dept_id=p.dept_id, dept_name=p.dept_name) for p in self._policies.values()]
