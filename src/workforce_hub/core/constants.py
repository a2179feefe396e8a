"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LEAVE_QUOTA = 12
DEFAULT_HISTORY_LIMIT = 200
DEFAULT_RECENT_EVENTS = 30
PRESENCE_WINDOWS_DAYS = (7, 30)
MAX_WORKED_HOURS_PER_DAY = 24
