"""Typed client for the Grokipedia API.

:class:`GrokipediaClient` owns the :class:`httpx.Client` and a
:class:`~grokipedia.client.executor.RequestExecutor`, and exposes one
method per endpoint.  Each method builds a
:class:`~grokipedia.client.executor.RequestDescriptor`, lets the executor
run it, and validates the body into the matching response model from
:mod:`grokipedia.models`.

The client does not cache; see :func:`grokipedia.context.fetch_cached`.
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Optional, Sequence

import httpx
from pydantic import TypeAdapter

from grokipedia import __version__
from grokipedia.client.executor import RequestDescriptor, RequestExecutor, RetryPolicy
from grokipedia.exceptions import NotFoundError
from grokipedia.models import (
    ApiConfig,
    EditsResponse,
    PageResponse,
    SearchResponse,
    TypeaheadResponse,
)

SEARCH_PATH = "/api/full-text-search"
PAGE_PATH = "/api/page"
TYPEAHEAD_PATH = "/api/typeahead"
CONSTANTS_PATH = "/api/constants"
EDITS_PATH = "/api/list-edit-requests"
EDITS_BY_SLUG_PATH = "/api/list-edit-requests-by-slug"

EDIT_STATUS_PREFIX = "EDIT_REQUEST_STATUS_"

_constants_adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


class GrokipediaClient:
    """Blocking client for the Grokipedia endpoints.

    Must be used as a context manager so that the underlying transport is
    opened and closed.

    Args:
        config: API settings (base URL, per-request timeout, rate-limit
            delay cap and overall deadline).
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.
        sleep: Forwarded to :class:`RequestExecutor`.
        rng: Forwarded to :class:`RequestExecutor`.
        clock: Forwarded to :class:`RequestExecutor`.

    Example::

        with GrokipediaClient(ApiConfig()) as client:
            hits = client.search("rust", limit=5)
    """

    def __init__(
        self,
        config: ApiConfig,
        transport: Optional[httpx.BaseTransport] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._rng = rng
        self._clock = clock
        self._http: Optional[httpx.Client] = None
        self._executor: Optional[RequestExecutor] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> GrokipediaClient:
        self._http = httpx.Client(
            base_url=self._config.url,
            timeout=self._config.timeout,
            follow_redirects=True,
            headers={
                "Accept": "application/json",
                "User-Agent": f"grokipedia-cli/{__version__}",
            },
            transport=self._transport,
        )
        self._executor = RequestExecutor(
            self._http,
            RetryPolicy(
                max_retry_delay=self._config.max_retry_delay,
                deadline=self._config.deadline,
            ),
            sleep=self._sleep,
            rng=self._rng,
            clock=self._clock,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._http:
            self._http.close()
            self._http = None
            self._executor = None

    @property
    def executor(self) -> RequestExecutor:
        assert self._executor is not None, "Client not initialised -- use as context manager"
        return self._executor

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    def search(self, query: str, limit: int, offset: int) -> SearchResponse:
        """Full-text search across all pages."""
        descriptor = self._descriptor(
            SEARCH_PATH, {"q": query, "limit": limit, "offset": offset}
        )
        return self.executor.execute(
            descriptor, lambda r: SearchResponse.model_validate_json(r.content)
        )

    def page(self, slug: str, include_content: bool, validate_links: bool) -> PageResponse:
        """Fetch a page by slug.

        Raises:
            NotFoundError: On HTTP 404, or when the API answers with
                ``found: false``.
        """
        descriptor = self._descriptor(
            PAGE_PATH,
            {
                "slug": slug,
                "includeContent": include_content,
                "validateLinks": validate_links,
            },
            resource=slug,
        )
        result: PageResponse = self.executor.execute(
            descriptor, lambda r: PageResponse.model_validate_json(r.content)
        )
        if not result.found:
            raise NotFoundError(slug)
        return result

    def typeahead(self, query: str, limit: int) -> TypeaheadResponse:
        """Title suggestions for a partial query."""
        descriptor = self._descriptor(TYPEAHEAD_PATH, {"q": query, "limit": limit})
        return self.executor.execute(
            descriptor, lambda r: TypeaheadResponse.model_validate_json(r.content)
        )

    def constants(self) -> dict[str, Any]:
        """API constants and enums as a flat JSON object."""
        return self.executor.execute(
            self._descriptor(CONSTANTS_PATH, {}),
            lambda r: _constants_adapter.validate_json(r.content),
        )

    def edits(
        self,
        limit: int,
        statuses: Sequence[str] = (),
        exclude_users: Sequence[str] = (),
        include_counts: bool = True,
    ) -> EditsResponse:
        """List edit requests across all pages.

        Args:
            limit: Maximum number of edit requests.
            statuses: Short status names (``approved``, ``pending``, ...);
                each is sent as ``status[]=EDIT_REQUEST_STATUS_<NAME>``.
            exclude_users: User ids sent as repeated ``excludeUserId[]``.
            include_counts: Ask the API for total counts.
        """
        params: dict[str, Any] = {"limit": limit, "includeCounts": include_counts}
        if statuses:
            params["status[]"] = [EDIT_STATUS_PREFIX + s.upper() for s in statuses]
        if exclude_users:
            params["excludeUserId[]"] = list(exclude_users)
        return self.executor.execute(
            self._descriptor(EDITS_PATH, params),
            lambda r: EditsResponse.model_validate_json(r.content),
        )

    def edits_by_slug(self, slug: str, limit: int, offset: int) -> EditsResponse:
        """List edit requests for a single page."""
        descriptor = self._descriptor(
            EDITS_BY_SLUG_PATH,
            {"slug": slug, "limit": limit, "offset": offset},
            resource=slug,
        )
        return self.executor.execute(
            descriptor, lambda r: EditsResponse.model_validate_json(r.content)
        )

    def _descriptor(
        self,
        path: str,
        params: dict[str, Any],
        resource: Optional[str] = None,
    ) -> RequestDescriptor:
        return RequestDescriptor(
            path=path,
            params=params,
            timeout=self._config.timeout,
            resource=resource,
        )
