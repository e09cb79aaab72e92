from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    def get_for_tenant(self, tenant: str) -> Optional[AttendanceSettings]:
        raise NotImplementedError

    def reset_daily_email_flags(self) -> int:
        """Clear the "report already sent" flag on every tenant. Returns rows touched."""

        raise NotImplementedError
