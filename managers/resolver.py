"""Turns whatever the caller passed (a string id or an object carrying one) into an id string."""
from typing import Any


class DataResolver:
    def resolve_id(self, value: Any) -> str | None:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        ident = getattr(value, "id", None)
        if isinstance(ident, (str, int)) and not isinstance(ident, bool):
            return str(ident).strip() or None
        return None
