"""
Cursor encoding for identifier-based pagination.

A cursor is the string form of the last identifier the client has seen.
Codecs turn that string back into the typed identifier used in store
queries, rejecting anything that is not a syntactically valid identifier.
"""

import re
from typing import Any, Protocol

from docpager.constants import OBJECT_ID_HEX_LENGTH
from docpager.exceptions import InvalidCursor

_DECIMAL_RE = re.compile(r"[0-9]+")
_OBJECT_ID_RE = re.compile(rf"[0-9a-fA-F]{{{OBJECT_ID_HEX_LENGTH}}}")


class IdentifierCodec(Protocol):
    """Converts between cursor strings and store identifiers."""

    def decode(self, cursor: str) -> Any:
        """
        Parse a cursor into an identifier.

        Raises:
            InvalidCursor: If the cursor is not a valid identifier.
        """
        ...

    def encode(self, identifier: Any) -> str:
        """Render an identifier as a cursor string."""
        ...


class IntegerIdCodec:
    """
    Cursors for non-negative integer identifiers.

    Example:
        >>> IntegerIdCodec().decode("9")
        9
        >>> IntegerIdCodec().encode(9)
        '9'
    """

    def decode(self, cursor: str) -> int:
        if not _DECIMAL_RE.fullmatch(cursor):
            raise InvalidCursor(cursor, "expected a non-negative integer")
        return int(cursor)

    def encode(self, identifier: Any) -> str:
        return str(identifier)


class ObjectIdCodec:
    """
    Cursors for 24-character hexadecimal (ObjectId-style) identifiers.

    Identifiers are normalized to lowercase, so lexical order matches
    creation order.
    """

    def decode(self, cursor: str) -> str:
        if not _OBJECT_ID_RE.fullmatch(cursor):
            raise InvalidCursor(
                cursor, f"expected {OBJECT_ID_HEX_LENGTH} hexadecimal characters"
            )
        return cursor.lower()

    def encode(self, identifier: Any) -> str:
        return str(identifier).lower()
