"""Commonly used typing helpers."""

from __future__ import annotations

from typing import Callable, TypeAlias, TypeVar, Union

from .exceptions import Error
from .models import SyncWarning

T = TypeVar("T")

# Result type: either a value of type ``T`` or an ``Error`` instance.
Result: TypeAlias = Union[T, Error]

# Warning channel: receives one structured message per failed field write.
Reporter: TypeAlias = Callable[[SyncWarning], None]

__all__ = ["Result", "Error", "Reporter"]
