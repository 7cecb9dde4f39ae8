"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_PERIOD_MINUTES = 15
DEFAULT_QR_MAX_AGE_DAYS = 30
DEFAULT_SCAN_COOLDOWN_SECONDS = 1.5
QR_SECRET_BYTES = 32
SECONDS_PER_DAY = 86400
