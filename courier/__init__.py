"""
courier: asyncio HTTP client facade with a request/response pipeline.

Example:
    ```python
    from courier import ClientConfig, RequestClient, StaticAuthContext

    async with RequestClient(ClientConfig(base_url="https://api.example"),
                             auth=StaticAuthContext(token="t")) as api:
        user = await api.get("/api/users/1")
    ```
"""

from __future__ import annotations

from .auth import AuthContextProvider, StaticAuthContext
from .client import RequestClient
from .config import ClientConfig
from .encoding import encode_body, encode_query, stringify_form
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    CourierError,
    RequestCancelledError,
    RequestFailedError,
    ValidationFailedError,
)
from .models import FormData, RequestDescriptor, RequestInterceptors, ResponseEnvelope
from .notify import LoggingNotifier, Notifier

__version__ = "0.1.0"

__all__ = [
    "AuthContextProvider",
    "AuthenticationError",
    "ClientConfig",
    "ConfigurationError",
    "CourierError",
    "FormData",
    "LoggingNotifier",
    "Notifier",
    "RequestCancelledError",
    "RequestClient",
    "RequestDescriptor",
    "RequestFailedError",
    "RequestInterceptors",
    "ResponseEnvelope",
    "StaticAuthContext",
    "ValidationFailedError",
    "__version__",
    "encode_body",
    "encode_query",
    "stringify_form",
]
