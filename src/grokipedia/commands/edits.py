"""Edit-request commands -- ``grokipedia edits`` and ``grokipedia edits-by-slug``."""

from __future__ import annotations

from typing import Any, Optional

import typer

from grokipedia.client.api import EDITS_BY_SLUG_PATH, EDITS_PATH
from grokipedia.commands import check_non_negative, check_range, get_app_context
from grokipedia.context import fetch_cached
from grokipedia.models import EditsResponse
from grokipedia.render import EDITS_FORMATS, render_edits, validate_format


def _split_statuses(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


def edits_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(
        None, "--limit", help="Maximum number of results (1-100)."
    ),
    status: Optional[str] = typer.Option(
        None,
        "--status",
        help="Filter by status (comma-separated: approved,implemented,pending).",
    ),
    exclude_user: Optional[list[str]] = typer.Option(
        None, "--exclude-user", help="Exclude edits by user id (repeatable)."
    ),
    counts: bool = typer.Option(
        True, "--counts/--no-counts", help="Include count metadata."
    ),
    fmt: str = typer.Option("table", "--format", help="Output format: table, json."),
) -> None:
    """List recent edit requests.

    Example::

        grokipedia edits --status approved,pending --exclude-user bot-1
    """
    app = get_app_context(ctx)
    limit = app.settings.commands.edits.limit if limit is None else limit
    validate_format(fmt, EDITS_FORMATS)
    check_range("limit", limit, 1, 100)

    statuses = _split_statuses(status)
    exclude_users = list(exclude_user or [])

    key_params: dict[str, Any] = {"limit": limit, "includeCounts": counts}
    if statuses:
        key_params["status"] = ",".join(sorted(s.upper() for s in statuses))
    if exclude_users:
        key_params["excludeUsers"] = ",".join(sorted(exclude_users))

    with app.client as client:
        result = fetch_cached(
            app.cache,
            EDITS_PATH,
            key_params,
            lambda: client.edits(limit, statuses, exclude_users, counts),
            EditsResponse,
        )
    render_edits(result, fmt, show_counts=counts)


def edits_by_slug_command(
    ctx: typer.Context,
    slug: str = typer.Argument(help="Page slug."),
    limit: int = typer.Option(20, "--limit", help="Maximum number of results (1-100)."),
    offset: int = typer.Option(0, "--offset", help="Offset for pagination."),
    fmt: str = typer.Option("table", "--format", help="Output format: table, json."),
) -> None:
    """List edit requests for a single page.

    Example::

        grokipedia edits-by-slug Python --limit 10
    """
    app = get_app_context(ctx)
    validate_format(fmt, EDITS_FORMATS)
    check_range("limit", limit, 1, 100)
    check_non_negative("offset", offset)

    with app.client as client:
        result = fetch_cached(
            app.cache,
            EDITS_BY_SLUG_PATH,
            {"slug": slug, "limit": limit, "offset": offset},
            lambda: client.edits_by_slug(slug, limit, offset),
            EditsResponse,
        )
    render_edits(result, fmt)
