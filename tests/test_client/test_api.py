"""Tests for GrokipediaClient endpoint methods."""

from __future__ import annotations

import json

import httpx
import pytest

from grokipedia.client import GrokipediaClient
from grokipedia.client.api import (
    CONSTANTS_PATH,
    EDITS_BY_SLUG_PATH,
    EDITS_PATH,
    PAGE_PATH,
    SEARCH_PATH,
    TYPEAHEAD_PATH,
)
from grokipedia.exceptions import GenericError, NotFoundError, RateLimitedError
from grokipedia.models import ApiConfig

BASE_URL = "https://api.example.com"

PAGE_BODY = {
    "page": {
        "title": "Python",
        "slug": "Python",
        "content": "Python is a language.",
        "description": "A programming language",
        "citations": [{"id": "1", "title": "Docs", "url": "https://python.org"}],
        "stats": {"totalViews": 1234, "qualityScore": 0.87},
        "linkedPages": {"indexedSlugs": ["Guido"], "unindexedSlugs": []},
    },
    "found": True,
}


class _Recorder:
    def __init__(self, status: int = 200, body: object = None, headers=None):
        self.status = status
        self.body = body if body is not None else {}
        self.headers = headers
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body, headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_client(sleeper, fixed_rng):
    def _make(handler, **config) -> GrokipediaClient:
        return GrokipediaClient(
            ApiConfig(url=BASE_URL, **config),
            transport=httpx.MockTransport(handler),
            sleep=sleeper,
            rng=fixed_rng,
        )

    return _make


class TestLifecycle:
    def test_requires_context_manager(self, make_client) -> None:
        client = make_client(_Recorder())
        with pytest.raises(AssertionError):
            client.constants()

    def test_sends_default_headers(self, make_client) -> None:
        recorder = _Recorder(body={})
        with make_client(recorder) as client:
            client.constants()
        assert recorder.last.headers["Accept"] == "application/json"
        assert recorder.last.headers["User-Agent"].startswith("grokipedia-cli/")
        assert str(recorder.last.url) == f"{BASE_URL}{CONSTANTS_PATH}"


class TestSearch:
    def test_params_and_model(self, make_client) -> None:
        recorder = _Recorder(
            body={
                "results": [
                    {"title": "Rust", "slug": "Rust", "relevanceScore": 0.9, "viewCount": 10}
                ],
                "totalCount": 1,
                "searchTimeMs": 3.5,
            }
        )
        with make_client(recorder) as client:
            result = client.search("rust lang", limit=5, offset=10)

        assert recorder.last.url.path == SEARCH_PATH
        assert dict(recorder.last.url.params) == {"q": "rust lang", "limit": "5", "offset": "10"}
        assert result.total_count == 1
        assert result.results[0].relevance_score == 0.9
        assert result.results[0].view_count == 10

    def test_unknown_fields_ignored(self, make_client) -> None:
        recorder = _Recorder(body={"results": [], "brandNewField": {"x": 1}})
        with make_client(recorder) as client:
            assert client.search("x", limit=1, offset=0).results == []


class TestPage:
    def test_found(self, make_client) -> None:
        recorder = _Recorder(body=PAGE_BODY)
        with make_client(recorder) as client:
            result = client.page("Python", include_content=True, validate_links=False)

        assert recorder.last.url.path == PAGE_PATH
        assert recorder.last.url.params["includeContent"] == "true"
        assert recorder.last.url.params["validateLinks"] == "false"
        assert result.page.stats.total_views == 1234
        assert result.page.linked_pages.indexed_slugs == ["Guido"]

    def test_found_false_is_not_found(self, make_client) -> None:
        with make_client(_Recorder(body={"found": False})) as client:
            with pytest.raises(NotFoundError, match="Page not found: Nope"):
                client.page("Nope", include_content=True, validate_links=True)

    def test_missing_found_is_not_found(self, make_client) -> None:
        with make_client(_Recorder(body={"page": {"title": "x"}})) as client:
            with pytest.raises(NotFoundError):
                client.page("x", include_content=True, validate_links=True)

    def test_http_404(self, make_client) -> None:
        recorder = _Recorder(status=404)
        with make_client(recorder) as client:
            with pytest.raises(NotFoundError) as exc_info:
                client.page("Gone", include_content=True, validate_links=True)
        assert exc_info.value.resource == "Gone"
        assert len(recorder.requests) == 1

    def test_wrong_shape_is_generic(self, make_client) -> None:
        with make_client(_Recorder(body={"page": "not an object", "found": True})) as client:
            with pytest.raises(GenericError, match="Failed to parse response from Python"):
                client.page("Python", include_content=True, validate_links=True)


class TestTypeaheadAndConstants:
    def test_typeahead(self, make_client) -> None:
        recorder = _Recorder(body={"suggestions": ["Python", "PyPy"]})
        with make_client(recorder) as client:
            result = client.typeahead("py", limit=2)
        assert recorder.last.url.path == TYPEAHEAD_PATH
        assert recorder.last.url.params["limit"] == "2"
        assert result.suggestions == ["Python", "PyPy"]

    def test_constants(self, make_client) -> None:
        with make_client(_Recorder(body={"MAX": 10, "NAME": "grok"})) as client:
            assert client.constants() == {"MAX": 10, "NAME": "grok"}

    def test_constants_not_an_object(self, make_client) -> None:
        with make_client(_Recorder(body=[1, 2, 3])) as client:
            with pytest.raises(GenericError):
                client.constants()


class TestEdits:
    def test_status_and_excluded_users_repeated(self, make_client) -> None:
        recorder = _Recorder(body={"editRequests": [], "totalCount": 0})
        with make_client(recorder) as client:
            client.edits(
                limit=20,
                statuses=["approved", "pending"],
                exclude_users=["u1", "u2"],
                include_counts=True,
            )
        params = recorder.last.url.params
        assert recorder.last.url.path == EDITS_PATH
        assert params.get_list("status[]") == [
            "EDIT_REQUEST_STATUS_APPROVED",
            "EDIT_REQUEST_STATUS_PENDING",
        ]
        assert params.get_list("excludeUserId[]") == ["u1", "u2"]
        assert params["includeCounts"] == "true"

    def test_filters_omitted_when_empty(self, make_client) -> None:
        recorder = _Recorder(body={})
        with make_client(recorder) as client:
            client.edits(limit=5)
        assert "status[]" not in recorder.last.url.params
        assert "excludeUserId[]" not in recorder.last.url.params

    def test_edits_by_slug(self, make_client) -> None:
        body = {
            "editRequests": [
                {
                    "id": "e1",
                    "slug": "Python",
                    "status": "EDIT_REQUEST_STATUS_APPROVED",
                    "timestamp": 1700000000,
                    "editor": "alice",
                }
            ],
            "totalCount": 1,
            "hasMore": True,
        }
        recorder = _Recorder(body=body)
        with make_client(recorder) as client:
            result = client.edits_by_slug("Python", limit=10, offset=0)
        assert recorder.last.url.path == EDITS_BY_SLUG_PATH
        assert recorder.last.url.params["slug"] == "Python"
        assert result.has_more is True
        assert result.edit_requests[0].editor == "alice"


class TestRetryThroughClient:
    def test_rate_limit_honours_configured_cap(self, make_client, sleeper) -> None:
        recorder = _Recorder(status=429, headers={"Retry-After": "60"})
        with make_client(recorder, max_retry_delay=0.5) as client:
            with pytest.raises(RateLimitedError):
                client.constants()
        assert len(recorder.requests) == 3
        assert sleeper.calls == [0.5, 0.5]

    def test_cached_payload_shape_matches_wire(self, make_client) -> None:
        with make_client(_Recorder(body=PAGE_BODY)) as client:
            result = client.page("Python", include_content=True, validate_links=True)
        dumped = json.loads(result.model_dump_json(by_alias=True))
        assert dumped["page"]["stats"]["totalViews"] == 1234
        assert dumped["found"] is True
