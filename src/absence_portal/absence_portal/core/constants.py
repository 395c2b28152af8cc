"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

RANGE_SEPARATOR = " - "
DEFAULT_SLOT_MINUTES = 60

DEFAULT_SEMESTERS = ("1", "2", "3", "4", "5", "6", "7", "8")
MIN_PASSWORD_LENGTH = 6

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200

# Start/end pickers offered by the timetable forms
TIME_OPTION_FIRST_HOUR = 8
TIME_OPTION_LAST_HOUR = 18
TIME_OPTION_STEP_MINUTES = 30

CSV_REQUIRED_COLUMNS = ("course", "semester", "day", "time", "subject", "facultyid", "facultyname")
