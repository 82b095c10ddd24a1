from collections.abc import Mapping
from typing import Any


def get_field(document: Any, field: str) -> Any:
    """Read a field from a mapping or an attribute-style document."""
    if isinstance(document, Mapping):
        return document.get(field)
    return getattr(document, field, None)
