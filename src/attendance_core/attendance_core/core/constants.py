"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ORG_UTC_OFFSET_HOURS = 7

# Wall-clock thresholds (hour, minute) in the organization's offset.
LATE_THRESHOLD = (8, 45)
LUNCH_START = (12, 0)
LUNCH_END = (13, 0)
SHIFT_END = (17, 30)
OT_THRESHOLD = (17, 31)
LUNCH_MINUTES = 60

DEFAULT_CHECKOUT_GRACE_HOURS = 24
MIN_CHECKOUT_GRACE_HOURS = 1
MAX_CHECKOUT_GRACE_HOURS = 48

DEFAULT_ADJUST_REQUEST_MAX_DAYS = 7
MIN_ADJUST_REQUEST_MAX_DAYS = 1
MAX_ADJUST_REQUEST_MAX_DAYS = 30

OPEN_SESSION_SCAN_LIMIT = 200
ANOMALY_SESSION_SUMMARY_LIMIT = 100
ANOMALY_RETENTION_DAYS = 90
ANOMALY_QUEUE_SIZE = 1000
