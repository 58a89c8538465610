"""API-wide constants."""

PROJECT_NAME = "Neurmatic API"
API_V1_STR = "/api/v1"
SCHEMA_VERSION = "v1"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
