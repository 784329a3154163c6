"""
Request pipeline internals: interceptors, in-flight registry, classifier and transport.
"""

from __future__ import annotations

from .classifier import (
    AuthFailure,
    Cancelled,
    GenericFailure,
    Outcome,
    PassThrough,
    ResponseClassifier,
    Success,
    ValidationFailure,
)
from .pipeline import DefaultRequestStage, compose, prepare
from .registry import CancellationHandle, InFlightRegistry
from .service import RequestService

__all__ = [
    "AuthFailure",
    "CancellationHandle",
    "Cancelled",
    "DefaultRequestStage",
    "GenericFailure",
    "InFlightRegistry",
    "Outcome",
    "PassThrough",
    "RequestService",
    "ResponseClassifier",
    "Success",
    "ValidationFailure",
    "compose",
    "prepare",
]
