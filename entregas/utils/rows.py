"""Helpers for values that may be pydantic models or raw Supabase rows."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Union

__all__ = ["JsonValue", "field_of"]

JsonValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, "JsonValue"],
    list["JsonValue"],
]

_MISSING = object()


def field_of(item: object, name: str, default: object = None) -> object:
    """Read *name* from a row mapping or from a model attribute.

    Pages pass either ``Order`` models or the dicts returned by
    ``response.data``; both carry ``id_loja``.
    """
    if isinstance(item, Mapping):
        return item.get(name, default)
    value = getattr(item, name, _MISSING)
    return default if value is _MISSING else value
