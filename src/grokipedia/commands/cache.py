"""Cache commands -- inspect and clear the response cache.

These commands operate on the configured cache directory even when
caching is switched off for the current invocation (``--no-cache``), so
a stale cache can always be inspected and removed.
"""

from __future__ import annotations

import typer

from grokipedia.cache import CacheStore
from grokipedia.commands import get_app_context
from grokipedia.output import get_output, success

cache_app = typer.Typer(no_args_is_help=True)


def _store(ctx: typer.Context) -> CacheStore:
    settings = get_app_context(ctx).settings
    return CacheStore(settings.cache.dir, settings.cache.ttl)


@cache_app.command("info")
def cache_info(ctx: typer.Context) -> None:
    """Show the cache directory, TTL and number of entries."""
    store = _store(ctx)
    stats = store.stats()
    stats["active"] = get_app_context(ctx).cache is not None
    get_output().print_json(stats)


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cached response."""
    store = _store(ctx)
    removed = store.clear()
    success(f"Removed {removed} cache file(s) from {store.directory}")
