"""
Courier data models.

Request descriptors, the pipeline's working copy and the envelope shapes are
all importable from this module.
"""

from __future__ import annotations

from .envelopes import (
    BareError,
    CourierModel,
    EnvelopedError,
    ErrorBody,
    NoBody,
    ResponseEnvelope,
    parse_error_body,
)
from .request import (
    FormData,
    PreparedRequest,
    QueryParams,
    RequestDescriptor,
    RequestInterceptor,
    RequestInterceptors,
)

__all__ = [
    "BareError",
    "CourierModel",
    "EnvelopedError",
    "ErrorBody",
    "FormData",
    "NoBody",
    "PreparedRequest",
    "QueryParams",
    "RequestDescriptor",
    "RequestInterceptor",
    "RequestInterceptors",
    "ResponseEnvelope",
    "parse_error_body",
]
