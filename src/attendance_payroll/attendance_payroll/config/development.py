import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Overtime pay: salary / (working_days * STANDARD_HOURS_PER_DAY) * OVERTIME_MULTIPLIER
STANDARD_HOURS_PER_DAY = int(os.getenv("STANDARD_HOURS_PER_DAY", "8"))
OVERTIME_MULTIPLIER = os.getenv("OVERTIME_MULTIPLIER", "2.0")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
