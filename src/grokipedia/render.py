"""Per-command output renderers.

Each ``render_*`` function writes one API response to stdout through the
installed :class:`~grokipedia.output.OutputManager` in the requested
format.  Formats are validated up front by :func:`validate_format` so an
unsupported ``--format`` fails before any network traffic.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from grokipedia.client.api import EDIT_STATUS_PREFIX
from grokipedia.exceptions import InvalidArgsError
from grokipedia.models import EditsResponse, PageResponse, SearchResponse, TypeaheadResponse
from grokipedia.output import get_output

SEARCH_FORMATS = ("table", "json", "markdown")
PAGE_FORMATS = ("markdown", "plain", "json")
EDITS_FORMATS = ("table", "json")
TYPEAHEAD_FORMATS = ("list", "json")
CONSTANTS_FORMATS = ("json", "yaml", "table")

_MAX_VALUE_WIDTH = 80


def validate_format(fmt: str, allowed: Sequence[str]) -> None:
    """Raise :class:`InvalidArgsError` unless *fmt* is one of *allowed*."""
    if fmt not in allowed:
        raise InvalidArgsError(
            f"invalid format '{fmt}' (allowed: {', '.join(allowed)})"
        )


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True)


def render_search(result: SearchResponse, fmt: str) -> None:
    output = get_output()
    if fmt == "json":
        output.print_json(_dump(result))
        return

    if fmt == "markdown":
        lines = ["# Search Results", ""]
        if not result.results:
            lines.append("No results found.")
        for r in result.results:
            lines.append(f"- [{r.title}]({r.slug})")
            lines.append(f"  Score: {r.relevance_score:.2f}, Views: {r.view_count}")
            if r.snippet:
                lines.append(f"  {r.snippet}")
            lines.append("")
        output.print_data("\n".join(lines).rstrip("\n"))
        return

    if not result.results:
        output.print_data("No results found.")
        return
    output.print_table(
        ["Title", "Slug", "Score", "Views"],
        [
            [r.title, r.slug, f"{r.relevance_score:.2f}", str(r.view_count)]
            for r in result.results
        ],
    )


def render_page(result: PageResponse, fmt: str, show_content: bool) -> None:
    output = get_output()
    if fmt == "json":
        output.print_json(_dump(result))
        return

    page = result.page
    lines: list[str] = []
    if fmt == "markdown":
        lines += [f"# {page.title}", ""]
        if page.description:
            lines += [page.description, ""]
        if show_content and page.content:
            lines += [page.content, ""]
        lines.append(f"**Slug:** {page.slug}")
        lines.append(f"**Views:** {page.stats.total_views}")
        lines.append(f"**Quality Score:** {page.stats.quality_score:.2f}")
        if page.citations:
            lines += ["", "## Citations"]
            lines += [f"- [{c.title}]({c.url})" for c in page.citations]
    else:
        lines.append(f"Title: {page.title}")
        if page.description:
            lines.append(f"Description: {page.description}")
        if show_content and page.content:
            lines += ["", "Content:", page.content]
        lines += ["", f"Slug: {page.slug}"]
        lines.append(f"Views: {page.stats.total_views}")
        lines.append(f"Quality Score: {page.stats.quality_score:.2f}")
    output.print_data("\n".join(lines))


def render_typeahead(result: TypeaheadResponse, fmt: str) -> None:
    output = get_output()
    if fmt == "json":
        output.print_json(_dump(result))
        return
    if not result.suggestions:
        output.print_data("No suggestions found.")
        return
    output.print_data("\n".join(result.suggestions))


def render_constants(constants: dict[str, Any], fmt: str) -> None:
    output = get_output()
    if fmt == "json":
        output.print_json(constants)
        return
    if fmt == "yaml":
        output.print_yaml(constants)
        return

    if not constants:
        output.print_data("No constants found.")
        return
    rows = []
    for key in sorted(constants):
        value = str(constants[key])
        if len(value) > _MAX_VALUE_WIDTH:
            value = value[: _MAX_VALUE_WIDTH - 3] + "..."
        rows.append([key, value])
    output.print_table(["Key", "Value"], rows)


def render_edits(result: EditsResponse, fmt: str, show_counts: bool = False) -> None:
    output = get_output()
    if fmt == "json":
        output.print_json(_dump(result))
        return

    if not result.edit_requests:
        output.print_data("No edit requests found.")
        return
    output.print_table(
        ["ID", "Slug", "Status", "Editor", "Timestamp"],
        [
            [
                e.id,
                e.slug,
                e.status.removeprefix(EDIT_STATUS_PREFIX),
                e.editor,
                datetime.fromtimestamp(e.timestamp).strftime("%Y-%m-%d %H:%M"),
            ]
            for e in result.edit_requests
        ],
    )
    if show_counts:
        total = f"Total: {result.total_count}"
        if result.has_more:
            total += " (more available)"
        output.print_data("")
        output.print_data(total)
