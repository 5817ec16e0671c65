"""Utility Package."""

from entregas.utils.rows import JsonValue, field_of
from entregas.utils.subscription import Subscription

__all__ = ["JsonValue", "Subscription", "field_of"]
