"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

UNKNOWN_COURSE = "UNKNOWN"

# Two-digit batch years: 00-30 -> 2000s, 31-99 -> 1900s.
TWO_DIGIT_YEAR_PIVOT = 30
MIN_BATCH_YEAR = 1980
MAX_BATCH_YEAR = 2030

ALL = "all"

EXPORT_HEADERS = (
    "Full Name",
    "Course",
    "Shift",
    "Batch",
    "Contact No.",
    "Present",
    "Checked In At",
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
