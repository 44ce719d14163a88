import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STANDARD_HOURS_PER_DAY = int(os.getenv("STANDARD_HOURS_PER_DAY", "8"))
OVERTIME_MULTIPLIER = os.getenv("OVERTIME_MULTIPLIER", "2.0")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
