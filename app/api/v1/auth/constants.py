"""Constants for authentication routes."""

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}
