from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import normalize_day_key
from .model import AttendanceEvent


@dataclass(frozen=True)
class TransitionDecision:
    """Presence for the next punch.

    ``carry_over_day`` is set when an IN left open on an earlier day has to be
    closed with a correction OUT dated to that day before the new punch.
    """

    presence: bool
    carry_over_day: Optional[str] = None

    @property
    def needs_correction(self) -> bool:
        return self.carry_over_day is not None


def resolve_transition(
    last_event: Optional[AttendanceEvent],
    today_key: str,
    explicit_presence: Optional[bool] = None,
) -> TransitionDecision:
    if isinstance(explicit_presence, bool):
        return TransitionDecision(presence=explicit_presence)

    if last_event is None:
        return TransitionDecision(presence=True)

    if last_event.presence:
        last_day = normalize_day_key(last_event.work_date) or last_event.work_date
        if last_day != today_key:
            return TransitionDecision(presence=True, carry_over_day=last_event.work_date)

    return TransitionDecision(presence=not last_event.presence)
