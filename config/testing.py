import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lesson_calendar_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LATE_GRACE_MINUTES = 5
QR_CODE_TTL_HOURS = 3

RESCHEDULE_HORIZON_WEEKS = 3
ALLOW_MULTIPLE_PENDING_RESCHEDULES = True

# Never call the real holiday API from tests.
HOLIDAY_API_KEY = ""
HOLIDAY_API_URL = ""
HOLIDAY_API_TIMEOUT = 1.0
