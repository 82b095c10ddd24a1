"""
Deterministic cache key generation.

Provides a single factory for the compound keys used by the pagination
cache, ensuring consistent SHA-256 hashing and key format.
"""

import hashlib
from typing import Any

from docpager.constants import CACHE_KEY_SEPARATOR
from docpager.schemas.filters import canonical_json


class CacheKeyFactory:
    """Factory for generating consistent, deterministic cache keys."""

    @staticmethod
    def compound(identity: str, *inputs: Any) -> str:
        """
        Combine a model identity and logical inputs into one key.

        The identity and all inputs are serialized together as canonical
        JSON (sorted keys) and SHA-256 hashed, so mappings that differ only
        in key order share a key while any other difference yields a new
        one. The identity is repeated in clear text for readability.

        Args:
            identity: Model or collection identity (e.g. "Article").
            *inputs: Filter and mode-specific parameters.

        Returns:
            Cache key string.

        Raises:
            InvalidArgument: If an input is not JSON-serializable.

        Examples:
            >>> CacheKeyFactory.compound("Article", {"status": "live"})
            'Article:<sha256>'
            >>> CacheKeyFactory.compound(
            ...     "Article", {"status": "live"}, "9", 20
            ... )
            'Article:<sha256>'
        """
        serialised = canonical_json([identity, *inputs])
        digest = hashlib.sha256(serialised.encode()).hexdigest()
        return f"{identity}{CACHE_KEY_SEPARATOR}{digest}"
