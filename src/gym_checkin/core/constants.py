"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 200
DATE_KEY_FORMAT = "%Y-%m-%d"

# The store returns at most this many OPEN rows per pair; more than one is a data fault.
OPEN_SESSION_PROBE_LIMIT = 2

MSG_CHECKED_IN = "Welcome to the gym! Session started."
MSG_ALREADY_CHECKED_IN = "You are already checked in at this gym."
MSG_CHECKED_OUT = "See you next time! Session duration: {duration}"
MSG_FAILED = "Failed to process attendance."
MSG_GYM_NOT_ACCEPTING = "This gym is not accepting check-ins."
