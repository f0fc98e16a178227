"""Search commands -- ``grokipedia search`` and ``grokipedia typeahead``."""

from __future__ import annotations

from typing import Optional

import typer

from grokipedia.client.api import SEARCH_PATH, TYPEAHEAD_PATH
from grokipedia.commands import check_non_negative, check_range, get_app_context
from grokipedia.context import fetch_cached
from grokipedia.models import SearchResponse, TypeaheadResponse
from grokipedia.render import (
    SEARCH_FORMATS,
    TYPEAHEAD_FORMATS,
    render_search,
    render_typeahead,
    validate_format,
)


def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search query."),
    limit: Optional[int] = typer.Option(
        None, "--limit", help="Maximum number of results (1-100)."
    ),
    offset: Optional[int] = typer.Option(
        None, "--offset", help="Offset for pagination."
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="Output format: table, json, markdown."
    ),
) -> None:
    """Search for pages.

    Defaults for ``--limit``, ``--offset`` and ``--format`` come from the
    ``commands.search`` section of the config file.

    Example::

        grokipedia search "quantum computing" --limit 5 --format markdown
    """
    app = get_app_context(ctx)
    defaults = app.settings.commands.search
    limit = defaults.limit if limit is None else limit
    offset = defaults.offset if offset is None else offset
    fmt = fmt or defaults.format

    validate_format(fmt, SEARCH_FORMATS)
    check_range("limit", limit, 1, 100)
    check_non_negative("offset", offset)

    with app.client as client:
        result = fetch_cached(
            app.cache,
            SEARCH_PATH,
            {"q": query, "limit": limit, "offset": offset},
            lambda: client.search(query, limit, offset),
            SearchResponse,
        )
    render_search(result, fmt)


def typeahead_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Partial page title."),
    limit: int = typer.Option(5, "--limit", help="Maximum number of suggestions (1-50)."),
    fmt: str = typer.Option("list", "--format", help="Output format: list, json."),
) -> None:
    """Suggest page titles for a partial query.

    Example::

        grokipedia typeahead pyth --limit 3
    """
    app = get_app_context(ctx)
    validate_format(fmt, TYPEAHEAD_FORMATS)
    check_range("limit", limit, 1, 50)

    with app.client as client:
        result = fetch_cached(
            app.cache,
            TYPEAHEAD_PATH,
            {"q": query, "limit": limit},
            lambda: client.typeahead(query, limit),
            TypeaheadResponse,
        )
    render_typeahead(result, fmt)
