"""Tests for per-command renderers."""

from __future__ import annotations

import json

import pytest

from grokipedia.exceptions import InvalidArgsError
from grokipedia.models import EditsResponse, PageResponse, SearchResponse, TypeaheadResponse
from grokipedia.render import (
    SEARCH_FORMATS,
    render_constants,
    render_edits,
    render_page,
    render_search,
    render_typeahead,
    validate_format,
)

SEARCH = SearchResponse.model_validate(
    {
        "results": [
            {
                "title": "Rust",
                "slug": "Rust_(programming_language)",
                "snippet": "A systems language",
                "relevanceScore": 0.912,
                "viewCount": 42,
            }
        ],
        "totalCount": 1,
    }
)

PAGE = PageResponse.model_validate(
    {
        "page": {
            "title": "Python",
            "slug": "Python",
            "description": "A language",
            "content": "Body text",
            "citations": [{"id": "1", "title": "Docs", "url": "https://python.org"}],
            "stats": {"totalViews": 7, "qualityScore": 0.5},
        },
        "found": True,
    }
)

EDITS = EditsResponse.model_validate(
    {
        "editRequests": [
            {
                "id": "e1",
                "slug": "Python",
                "status": "EDIT_REQUEST_STATUS_APPROVED",
                "timestamp": 1700000000,
                "editor": "alice",
            }
        ],
        "totalCount": 3,
        "hasMore": True,
    }
)


class TestValidateFormat:
    def test_accepts_known(self) -> None:
        for fmt in SEARCH_FORMATS:
            validate_format(fmt, SEARCH_FORMATS)

    def test_rejects_unknown(self) -> None:
        with pytest.raises(InvalidArgsError, match="invalid format 'xml'") as exc_info:
            validate_format("xml", SEARCH_FORMATS)
        assert exc_info.value.exit_code == 4


class TestSearch:
    def test_table(self, capsys) -> None:
        render_search(SEARCH, "table")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Title\tSlug\tScore\tViews"
        assert lines[1] == "Rust\tRust_(programming_language)\t0.91\t42"

    def test_json_uses_wire_names(self, capsys) -> None:
        render_search(SEARCH, "json")
        data = json.loads(capsys.readouterr().out)
        assert data["results"][0]["relevanceScore"] == 0.912
        assert data["totalCount"] == 1

    def test_markdown(self, capsys) -> None:
        render_search(SEARCH, "markdown")
        out = capsys.readouterr().out
        assert out.startswith("# Search Results")
        assert "- [Rust](Rust_(programming_language))" in out
        assert "Score: 0.91, Views: 42" in out

    def test_empty(self, capsys) -> None:
        render_search(SearchResponse(), "table")
        assert capsys.readouterr().out.strip() == "No results found."


class TestPage:
    def test_markdown_with_content(self, capsys) -> None:
        render_page(PAGE, "markdown", show_content=True)
        out = capsys.readouterr().out
        assert out.startswith("# Python\n")
        assert "Body text" in out
        assert "**Views:** 7" in out
        assert "**Quality Score:** 0.50" in out
        assert "- [Docs](https://python.org)" in out

    def test_plain_without_content(self, capsys) -> None:
        render_page(PAGE, "plain", show_content=False)
        out = capsys.readouterr().out
        assert "Title: Python" in out
        assert "Body text" not in out
        assert "Slug: Python" in out

    def test_json(self, capsys) -> None:
        render_page(PAGE, "json", show_content=False)
        data = json.loads(capsys.readouterr().out)
        assert data["found"] is True
        assert data["page"]["stats"]["totalViews"] == 7


class TestTypeahead:
    def test_list(self, capsys) -> None:
        render_typeahead(TypeaheadResponse(suggestions=["Python", "PyPy"]), "list")
        assert capsys.readouterr().out == "Python\nPyPy\n"

    def test_empty(self, capsys) -> None:
        render_typeahead(TypeaheadResponse(), "list")
        assert capsys.readouterr().out.strip() == "No suggestions found."


class TestConstants:
    def test_yaml_sorted(self, capsys) -> None:
        render_constants({"b": 2, "a": "x"}, "yaml")
        assert capsys.readouterr().out == "a: x\nb: 2\n"

    def test_table_truncates_long_values(self, capsys) -> None:
        render_constants({"LONG": "y" * 200, "SHORT": 1}, "table")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Key\tValue"
        key, value = lines[1].split("\t")
        assert key == "LONG"
        assert len(value) == 80
        assert value.endswith("...")
        assert lines[2] == "SHORT\t1"

    def test_json(self, capsys) -> None:
        render_constants({"a": [1, 2]}, "json")
        assert json.loads(capsys.readouterr().out) == {"a": [1, 2]}


class TestEdits:
    def test_table_strips_status_prefix(self, capsys) -> None:
        render_edits(EDITS, "table")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "ID\tSlug\tStatus\tEditor\tTimestamp"
        fields = lines[1].split("\t")
        assert fields[:4] == ["e1", "Python", "APPROVED", "alice"]

    def test_counts_footer(self, capsys) -> None:
        render_edits(EDITS, "table", show_counts=True)
        assert capsys.readouterr().out.splitlines()[-1] == "Total: 3 (more available)"

    def test_empty(self, capsys) -> None:
        render_edits(EditsResponse(), "table")
        assert capsys.readouterr().out.strip() == "No edit requests found."
