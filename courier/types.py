"""
Shared constants and type aliases.
"""

from __future__ import annotations

from typing import Literal, TypeAlias

ResponseType: TypeAlias = Literal["json", "blob"]
Scalar: TypeAlias = str | int | float | bool

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_MULTIPART = "multipart/form-data"

# Methods whose url-encoded payloads are stringified into a form body.
FORM_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

SUCCESS_CODE = 0
UNAUTHORIZED_CODE = 401
UNPROCESSABLE_CODE = 422
SUCCESS_STATUSES = frozenset({200, 201})

REQUEST_TIMEOUT_SECONDS = 60.0

AUTH_FAILED_MESSAGE = "Authentication failed. Please login again."
VALIDATION_FALLBACK_MESSAGE = "Validation error"
GENERIC_FALLBACK_MESSAGE = "An error occurred"
NETWORK_FALLBACK_MESSAGE = "Network error"
