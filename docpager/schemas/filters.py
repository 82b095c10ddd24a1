"""
Filter normalization and canonical serialization.

Filters are passed through to the document store untouched; the pagination
core only needs them as a plain mapping and as a stable string for cache
key derivation.
"""

import json
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from docpager.constants import CURSOR_CONDITION_OPERATOR
from docpager.exceptions import InvalidArgument

Filter = dict[str, Any] | PydanticBaseModel | None


def convert_filters(filters: Filter) -> dict[str, Any]:
    """
    Convert a filter to a plain dict.

    Args:
        filters: Either a dict, a Pydantic model, or None.

    Returns:
        Dictionary of filter key-value pairs. Pydantic models are dumped
        with None values excluded; None becomes an empty dict.

    Example:
        >>> class ArticleFilters(BaseModel):
        ...     author: str | None = None
        ...     status: str | None = None
        >>> convert_filters(ArticleFilters(status="published"))
        {'status': 'published'}
    """
    if filters is None:
        return {}

    if isinstance(filters, PydanticBaseModel):
        return filters.model_dump(exclude_none=True)

    if not isinstance(filters, dict):
        raise InvalidArgument(
            f"Filter must be a dict or a Pydantic model, got {type(filters).__name__}"
        )
    return dict(filters)


def canonical_json(value: Any) -> str:
    """
    Serialize a value to JSON with a stable key order.

    Two logically equal mappings always produce the same string regardless
    of insertion order.

    Raises:
        InvalidArgument: If the value contains something JSON cannot
            represent.
    """
    try:
        return json.dumps(
            to_jsonable_python(value),
            sort_keys=True,
            separators=(",", ":"),
        )
    except (PydanticSerializationError, TypeError, ValueError) as ex:
        raise InvalidArgument(f"Filter is not serializable: {ex}") from ex


def add_cursor_condition(
    filter: dict[str, Any], id_field: str, cursor_id: Any
) -> dict[str, Any]:
    """
    Restrict a filter to identifiers strictly below the cursor.

    A caller condition on the identifier field is kept alongside the cursor
    bound; an existing upper bound only survives if it is tighter.

    Example:
        >>> add_cursor_condition({"status": "live"}, "id", 9)
        {'status': 'live', 'id': {'$lt': 9}}
        >>> add_cursor_condition({"id": {"$gte": 3}}, "id", 9)
        {'id': {'$gte': 3, '$lt': 9}}
    """
    existing = filter.get(id_field)

    if isinstance(existing, dict):
        condition = dict(existing)
        bound = existing.get(CURSOR_CONDITION_OPERATOR)
        if type(bound) is not type(cursor_id) or cursor_id < bound:
            condition[CURSOR_CONDITION_OPERATOR] = cursor_id
    elif isinstance(existing, (list, tuple)):
        condition = {"$in": list(existing), CURSOR_CONDITION_OPERATOR: cursor_id}
    elif existing is not None:
        condition = {"$eq": existing, CURSOR_CONDITION_OPERATOR: cursor_id}
    else:
        condition = {CURSOR_CONDITION_OPERATOR: cursor_id}

    return {**filter, id_field: condition}
