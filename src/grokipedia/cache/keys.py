"""Cache key derivation.

A cache key is the first :data:`KEY_LENGTH` hex characters of the SHA-256
digest of ``endpoint?query``, where ``query`` is the form-encoded
parameter bag with its names sorted.  Two bags with the same content in a
different insertion order therefore hash to the same key.
"""

from __future__ import annotations

import hashlib
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

KEY_LENGTH = 12


def _format_value(value: Any) -> str:
    """Render a scalar the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonical_form(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Return ``endpoint?query`` with parameters sorted by name and ``None`` values dropped.

    Args:
        endpoint: API path, e.g. ``/api/page``.
        params: Mapping of parameter name to a scalar (str, int, float or
            bool).  ``None`` and an empty mapping are both allowed.

    Returns:
        The canonical string that is hashed into a key.
    """
    pairs = [
        (name, _format_value(value))
        for name, value in sorted((params or {}).items())
        if value is not None
    ]
    return f"{endpoint}?{urlencode(pairs)}"


def canonicalize(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Derive the cache key for a request.

    Example::

        key = canonicalize("/api/typeahead", {"q": "rust", "limit": 5})
        assert key == canonicalize("/api/typeahead", {"limit": 5, "q": "rust"})

    Returns:
        A :data:`KEY_LENGTH`-character lowercase hex string.
    """
    digest = hashlib.sha256(canonical_form(endpoint, params).encode("utf-8"))
    return digest.hexdigest()[:KEY_LENGTH]
