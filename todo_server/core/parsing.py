"""Lenient parsing of request values."""

from __future__ import annotations

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(raw: str | None, default: bool = False) -> bool:
    """Parse a boolean query/form value.

    Unrecognized or missing values yield ``default`` instead of an error so
    that the request still gets an answer.
    """
    if raw is None:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default
