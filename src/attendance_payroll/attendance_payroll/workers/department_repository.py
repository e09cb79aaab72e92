from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .department_model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, tenant: str, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def list_for_tenant(self, tenant: str) -> Sequence[Department]:
        raise NotImplementedError
