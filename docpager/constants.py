"""
Library-level constants for hardcoded pagination behavior.

These values define cache key layout and logging limits and should NEVER be
changed via environment variables. For configurable values (TTL, default
page sizes, Redis connection settings), see docpager/settings.py.
"""

# ============================================================================
# Cache Namespaces
# ============================================================================

# Namespace for cached total counts used by offset pagination
COUNT_CACHE_NAMESPACE = "total"

# Namespace for whole cursor page responses
CURSOR_CACHE_NAMESPACE = "pagination"

# Separator between compound cache key segments
CACHE_KEY_SEPARATOR = ":"


# ============================================================================
# Cursor Pagination
# ============================================================================

# Query operator used to continue a descending traversal below the cursor
CURSOR_CONDITION_OPERATOR = "$lt"

# Length of an ObjectId-style hexadecimal identifier
OBJECT_ID_HEX_LENGTH = 24


# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single JSON log line shipped to Loki
LOKI_MAX_LOG_SIZE_BYTES = 64 * 1024
