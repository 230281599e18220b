"""Application-wide constants."""

PROJECT_NAME = "DevTracker API"
API_VERSION = "1.0"
API_V1_STR = "/api/v1"

OPENAPI_URL = "/v3/api-docs"
DOCS_URL = "/swagger-ui"
REDOC_URL = "/redoc"
