"""Conversion primitives imported by generated route bindings.

Absent values (``None`` from the router's query accessor) pass through as
the default; presence checks are left to the service.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Invalid boolean {raw!r}")


def _parse_enum(target: type[enum.Enum], raw: str) -> enum.Enum:
    for member in target:
        if isinstance(member.value, str):
            if member.value == raw:
                return member
            continue
        try:
            if parse(type(member.value), raw) == member.value:
                return member
        except ValueError:
            continue
    raise ValueError(f"Invalid {target.__name__} value {raw!r}")


def parse(target: Callable[..., T], raw: Optional[str], default: Any = None) -> Any:
    """Convert one raw string to ``target`` (str, int, float, bool or an Enum)."""
    if raw is None:
        return default
    if isinstance(target, type) and issubclass(target, enum.Enum):
        return _parse_enum(target, raw)
    if target is bool:
        return _parse_bool(raw)
    return target(raw)


def split(raw: Optional[str], separator: str = ",") -> Optional[list[str]]:
    """Split an explode=false array value; empty items are dropped."""
    if raw is None:
        return None
    return [item for item in raw.split(separator) if item]


def parse_array(target: Callable[..., T], values: Optional[Iterable[str]], default: Any = None) -> Any:
    """Convert each raw item with parse()."""
    if values is None:
        return default
    return [parse(target, value) for value in values]
