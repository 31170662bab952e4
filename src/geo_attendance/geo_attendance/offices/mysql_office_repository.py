from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.model import OfficeLocation
from .repository import OfficeRepository


def _to_office(r: Dict[str, Any]) -> OfficeLocation:
    return OfficeLocation(
        office_id=int(r["office_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=float(r["radius_meters"]),
        is_active=bool(r["is_active"]),
    )


class MySQLOfficeRepository(OfficeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT office_id, name, latitude, longitude, radius_meters, is_active
                FROM office_locations
                WHERE is_active=1
                ORDER BY office_id
                """
            )
            return [_to_office(r) for r in fetchall(cur)]

    def get_by_id(self, office_id: int) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT office_id, name, latitude, longitude, radius_meters, is_active
                FROM office_locations
                WHERE office_id=%s
                """,
                (int(office_id),),
            )
            r = fetchone(cur)
            return _to_office(r) if r else None

    def soft_delete(self, office_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE office_locations SET is_active=0 WHERE office_id=%s", (int(office_id),))
            return cur.rowcount > 0
