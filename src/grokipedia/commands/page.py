"""Page command -- ``grokipedia page SLUG``."""

from __future__ import annotations

import typer

from grokipedia.client.api import PAGE_PATH
from grokipedia.commands import get_app_context
from grokipedia.context import fetch_cached
from grokipedia.models import PageResponse
from grokipedia.render import PAGE_FORMATS, render_page, validate_format


def page_command(
    ctx: typer.Context,
    slug: str = typer.Argument(help="Page slug."),
    content: bool = typer.Option(False, "--content", help="Include the page content."),
    no_links: bool = typer.Option(False, "--no-links", help="Skip link validation."),
    fmt: str = typer.Option(
        "markdown", "--format", help="Output format: markdown, plain, json."
    ),
) -> None:
    """Retrieve a page by slug.

    Exits with status 2 when the page does not exist.

    Example::

        grokipedia page Python_programming_language --content
    """
    app = get_app_context(ctx)
    validate_format(fmt, PAGE_FORMATS)
    validate_links = not no_links

    with app.client as client:
        result = fetch_cached(
            app.cache,
            PAGE_PATH,
            {"slug": slug, "includeContent": content, "validateLinks": validate_links},
            lambda: client.page(slug, content, validate_links),
            PageResponse,
        )
    render_page(result, fmt, show_content=content)
