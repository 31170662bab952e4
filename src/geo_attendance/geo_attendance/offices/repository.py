from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..geo.model import OfficeLocation


class OfficeRepository(Protocol):
    """Source of registered office geofences. Office CRUD lives outside this service."""

    def list_active(self) -> Sequence[OfficeLocation]:
        raise NotImplementedError

    def get_by_id(self, office_id: int) -> Optional[OfficeLocation]:
        raise NotImplementedError

    def soft_delete(self, office_id: int) -> bool:
        raise NotImplementedError
