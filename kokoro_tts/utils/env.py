"""Typed readers for environment variables."""
from __future__ import annotations

import os
from typing import Callable, Optional, TypeVar

T = TypeVar("T", int, float)


def get_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the stripped value of ``name``; blank counts as unset."""
    value = os.environ.get(name, "").strip()
    return value or default


def _get_number(name: str, default: T, cast: Callable[[str], T]) -> T:
    value = get_str(name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError:
        return default


def get_int(name: str, default: int) -> int:
    return _get_number(name, default, int)


def get_float(name: str, default: float) -> float:
    return _get_number(name, default, float)
