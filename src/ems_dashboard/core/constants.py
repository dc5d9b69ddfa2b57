"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_REPORT_MONTHS = 6
MIN_PASSWORD_LENGTH = 6

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
