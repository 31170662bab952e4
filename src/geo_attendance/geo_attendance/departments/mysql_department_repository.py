from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Department, DepartmentPolicy
from .repository import DepartmentPolicyRepository


class MySQLDepartmentPolicyRepository(DepartmentPolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_department(self, dept_id: int) -> Optional[DepartmentPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.dept_id, d.dept_name,
                       p.expected_check_in, p.expected_check_out, p.earliest_check_in,
                       p.late_grace_minutes, p.overtime_threshold_minutes,
                       p.auto_checkout_after_minutes, p.half_day_minutes,
                       p.allow_remote_work, p.allow_field_work, p.allow_early_check_out
                FROM departments d
                JOIN department_policies p ON p.dept_id = d.dept_id
                WHERE d.dept_id=%s
                """,
                (int(dept_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            for col in ("expected_check_in", "expected_check_out", "earliest_check_in"):
                r[col] = normalize_mysql_time(r.get(col))
            return DepartmentPolicy.from_mapping(r)

    def list_departments(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name FROM departments ORDER BY dept_name")
            rows = fetchall(cur)
            return [Department(dept_id=int(r["dept_id"]), dept_name=r["dept_name"]) for r in rows]
