"""Shared failure reason codes for per-source query results."""

QUERY_ERROR = "query_error"
SOURCE_ABSENT = "source_absent"
MALFORMED_RESPONSE = "malformed_response"
UNEXPECTED_ERROR = "unexpected_error"
