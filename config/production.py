import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
AUTO_CLOSE_TIME = os.getenv("AUTO_CLOSE_TIME", "23:00")
ENABLE_SCHEDULERS = bool(int(os.getenv("ENABLE_SCHEDULERS", "1")))

REPORT_JOB_WORKERS = int(os.getenv("REPORT_JOB_WORKERS", "4"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
