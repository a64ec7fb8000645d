"""Constants for public brief routes."""

CURRENT_CACHE_KEY = "current"
BY_MONTH_CACHE_KEY = "by-month"
SEARCH_MAX_LENGTH = 200
