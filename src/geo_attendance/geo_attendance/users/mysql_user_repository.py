from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.role, u.dept_id, u.is_active, d.dept_name
                FROM users u
                LEFT JOIN departments d ON d.dept_id = u.dept_id
                WHERE u.user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                user_id=int(row["user_id"]),
                full_name=row["full_name"],
                role=Role(row["role"]),
                dept_id=int(row["dept_id"]) if row.get("dept_id") is not None else None,
                dept_name=row.get("dept_name"),
                is_active=bool(row.get("is_active", True)),
            )
