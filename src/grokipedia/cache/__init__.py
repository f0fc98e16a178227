"""On-disk response caching for grokipedia.

This package provides :class:`CacheStore`, a file-per-entry cache with
TTL expiry and self-healing on corruption, and :func:`canonicalize`, which
derives the fixed-length key an entry is stored under from an endpoint
path and its query parameters.

The store is built once per invocation from the ``cache`` section of
:class:`~grokipedia.models.Settings` and handed to commands through
:class:`~grokipedia.context.AppContext`.
"""

from grokipedia.cache.keys import KEY_LENGTH, canonicalize
from grokipedia.cache.store import CacheStore

__all__ = ["CacheStore", "KEY_LENGTH", "canonicalize"]
