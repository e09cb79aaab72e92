from __future__ import annotations

import logging

from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Midnight reset of the per-tenant daily report flags."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def reset_daily_flags(self) -> int:
        count = self._settings.reset_daily_email_flags()
        logger.info("Daily email flags reset for %d tenant(s)", count)
        return count
