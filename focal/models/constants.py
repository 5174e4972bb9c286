"""Constants for Focal.

This module centralizes default values and engine limits used throughout the application.
"""


# Task template defaults
DEFAULT_DURATION_MINUTES = 60
DEFAULT_ENERGY_LEVEL = 2
DEFAULT_ICON = "📝"
DEFAULT_COLOR_NAME = "sage"

# Energy levels (0 = restful .. 4 = intense)
MIN_ENERGY_LEVEL = 0
MAX_ENERGY_LEVEL = 4

# Calendar
DEFAULT_TIME_ZONE = "UTC"

# Occurrence engine limits
NEXT_OCCURRENCE_SEARCH_DAYS = 365  # next_occurrence checks at most this many days
MAX_OCCURRENCE_RANGE_DAYS = 366  # largest range the API will materialize in one call
