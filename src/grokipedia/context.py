"""Per-invocation context and the cache-then-network fetch path.

:class:`AppContext` replaces process-wide client and cache handles: the
root CLI callback builds one from the resolved settings and every command
receives it through ``ctx.obj``.

:func:`fetch_cached` is the single place where the cache and the network
meet::

    key = canonicalize(endpoint, key_params)
    cache.get(key)  --hit-->  validated model
        |miss
    fetch()  --ok-->  cache.set(key, model JSON)  -->  model
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from grokipedia.cache import CacheStore, canonicalize
from grokipedia.client import GrokipediaClient
from grokipedia.models import Settings
from grokipedia.output import get_output

T = TypeVar("T")


@dataclass
class AppContext:
    """Everything a command needs, built once per CLI invocation.

    Attributes:
        settings: Effective configuration.
        client: API client factory result; entered by the command.
        cache: Response cache, or ``None`` when caching is off.
    """

    settings: Settings
    client: GrokipediaClient
    cache: Optional[CacheStore] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> AppContext:
        cache: Optional[CacheStore] = None
        if settings.cache_active():
            cache = CacheStore(settings.cache.dir, settings.cache.ttl)
        return cls(settings=settings, client=GrokipediaClient(settings.api), cache=cache)


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def fetch_cached(
    cache: Optional[CacheStore],
    endpoint: str,
    key_params: Mapping[str, Any],
    fetch: Callable[[], T],
    response_type: Any,
) -> T:
    """Return a cached response, or call *fetch* and cache its result.

    Args:
        cache: The store to use; ``None`` or a disabled store skips caching.
        endpoint: Endpoint path, part of the cache key.
        key_params: Scalar parameters that identify the request.
        fetch: Performs the network call and returns the validated model.
        response_type: Type of the value *fetch* returns (a response model
            or ``dict[str, Any]``); used to (de)serialise cache payloads.

    Cache problems never fail the call: an unreadable payload is refetched
    and a failed write is reported at debug level only.
    """
    output = get_output()
    adapter = _adapter(response_type)

    key: Optional[str] = None
    if cache is not None and cache.is_enabled():
        key = canonicalize(endpoint, key_params)
        payload = cache.get(key)
        if payload is not None:
            try:
                result = adapter.validate_json(payload)
            except ValidationError:
                output.debug(f"Cache entry {key} does not match {endpoint}, refetching")
            else:
                output.debug(f"Cache hit: {endpoint} ({key})")
                return result
        else:
            output.debug(f"Cache miss: {endpoint} ({key})")

    result = fetch()

    if cache is not None and key is not None:
        try:
            cache.set(key, adapter.dump_json(result, by_alias=True))
        except OSError as exc:
            output.debug(f"Cache write failed for {endpoint}: {exc}")
    return result
