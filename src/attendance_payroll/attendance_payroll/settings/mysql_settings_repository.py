from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_decimal
from .model import AttendanceLocation, AttendanceSettings, AttendanceTimer, MonthlyWorkingDays, WorkerTimer
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_tenant(self, tenant: str) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant, email_reports_enabled, email_sent_today, last_email_sent,
                       global_hours, apply_to_all_workers,
                       location_enabled, location_latitude, location_longitude, location_radius, location_locked
                FROM settings
                WHERE tenant=%s
                """,
                (tenant,),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                "SELECT worker_id, hours FROM settings_worker_timers WHERE tenant=%s ORDER BY worker_id",
                (tenant,),
            )
            timers = tuple(
                WorkerTimer(worker_id=int(t["worker_id"]), hours=to_decimal(t["hours"])) for t in fetchall(cur)
            )

            cur.execute(
                "SELECT month, working_days FROM settings_monthly_working_days WHERE tenant=%s ORDER BY month",
                (tenant,),
            )
            months = tuple(
                MonthlyWorkingDays(month=m["month"], working_days=int(m["working_days"])) for m in fetchall(cur)
            )

        return AttendanceSettings(
            tenant=r["tenant"],
            attendance_timer=AttendanceTimer(
                global_hours=to_decimal(r["global_hours"]),
                apply_to_all_workers=bool(r["apply_to_all_workers"]),
                specific_workers=timers,
            ),
            monthly_working_days=months,
            attendance_location=AttendanceLocation(
                enabled=bool(r["location_enabled"]),
                latitude=float(r["location_latitude"]),
                longitude=float(r["location_longitude"]),
                radius=float(r["location_radius"]),
                locked=bool(r["location_locked"]),
            ),
            email_reports_enabled=bool(r["email_reports_enabled"]),
            email_sent_today=bool(r["email_sent_today"]),
            last_email_sent=from_db_datetime(r.get("last_email_sent")),
        )

    def reset_daily_email_flags(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE settings SET email_sent_today=0, last_email_sent=NULL WHERE email_sent_today=1")
            return int(cur.rowcount)
