"""
Observation hooks for the transport layer.

Hooks see each prepared request, raw response and transport error. They cannot
change the outcome of a call.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

import httpx

from .models.request import PreparedRequest

RequestHook: TypeAlias = Callable[[PreparedRequest], None]
ResponseHook: TypeAlias = Callable[[httpx.Response], None]
ErrorHook: TypeAlias = Callable[[Exception], None]
