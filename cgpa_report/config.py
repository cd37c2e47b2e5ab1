"""
Configuration constants for the CGPA report.

Grade tables and month lookups are read-only mappings so that nothing
importing them can change the scale for other requests.
"""

import os
from types import MappingProxyType

# ------------------------
# Grade scale
# ------------------------

# 10-point scale used by the student app. P (Pass) has an entry so that it
# can be looked up and displayed, but it never takes part in an average.
GRADE_POINTS = MappingProxyType({
    "S": 10,
    "A": 9,
    "B": 8,
    "C": 7,
    "D": 6,
    "E": 5,
    "F": 0,
    "P": 0,
})

GRADE_ORDER = ("S", "A", "B", "C", "D", "E", "F", "P")

PASS_GRADE = "P"


# ------------------------
# Semester labels
# ------------------------
# exam_month looks like "Jan-2024"

MONTH_INDEX = MappingProxyType({
    "Jan": 0, "Feb": 1, "Mar": 2, "Apr": 3, "May": 4, "Jun": 5,
    "Jul": 6, "Aug": 7, "Sep": 8, "Oct": 9, "Nov": 10, "Dec": 11,
})


# ------------------------
# Presentation
# ------------------------

DISPLAY_DECIMALS = 2

MALFORMED_DATA_MESSAGE = "Invalid or malformed data string provided."


# ------------------------
# Transport
# ------------------------

# Tried in order when turning decompressed bytes into text. latin-1 maps
# every byte, so it always succeeds as the last resort.
TEXT_ENCODINGS = ("utf-8-sig", "latin-1")


# ------------------------
# Logging
# ------------------------

LOG_LEVEL = os.getenv("CGPA_LOG_LEVEL", "INFO").upper()
