"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_QR_CODE_TTL_HOURS = 3
DEFAULT_RESCHEDULE_HORIZON_WEEKS = 3

# Reschedule time picker: every 30 minutes, 07:00 .. 21:30
RESCHEDULE_SLOT_START_HOUR = 7
RESCHEDULE_SLOT_END_HOUR = 22
RESCHEDULE_SLOT_MINUTES = 30

HOLIDAY_API_URL = "http://apis.data.go.kr/B090041/openapi/service/SpcdeInfoService/getRestDeInfo"
HOLIDAY_API_TIMEOUT_SECONDS = 5.0

# Longest range a single calendar query may cover (a 6-week month grid fits).
MAX_CALENDAR_RANGE_DAYS = 62
