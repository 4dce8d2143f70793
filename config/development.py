import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lesson_calendar"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Attendance
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
QR_CODE_TTL_HOURS = int(os.getenv("QR_CODE_TTL_HOURS", "3"))

# Reschedule requests
RESCHEDULE_HORIZON_WEEKS = int(os.getenv("RESCHEDULE_HORIZON_WEEKS", "3"))
ALLOW_MULTIPLE_PENDING_RESCHEDULES = bool(int(os.getenv("ALLOW_MULTIPLE_PENDING_RESCHEDULES", "1")))

# Public holiday API (optional; static tables are used when no key is set)
HOLIDAY_API_KEY = os.getenv("HOLIDAY_API_KEY", "")
HOLIDAY_API_URL = os.getenv("HOLIDAY_API_URL", "")
HOLIDAY_API_TIMEOUT = float(os.getenv("HOLIDAY_API_TIMEOUT", "5"))
