"""Pydantic models shared across grokipedia.

The models fall into two groups:

**Configuration models** -- loaded from ``~/.grokipedia/config.yml`` and
layered with environment variables and CLI flags by
:func:`~grokipedia.config.load_settings`:
    :class:`ApiConfig`, :class:`CacheConfig`, :class:`OutputConfig`,
    :class:`SearchDefaults`, :class:`EditsDefaults`,
    :class:`CommandsConfig` and :class:`Settings`.

**Cache metadata** -- :class:`CacheMetadata`, the freshness record that
:class:`~grokipedia.cache.CacheStore` writes beside each payload.

**Response models** -- the JSON bodies returned by the API, validated by
:class:`~grokipedia.client.api.GrokipediaClient`:
    :class:`SearchResponse`, :class:`PageResponse`,
    :class:`TypeaheadResponse` and :class:`EditsResponse` plus their
    nested item models.

Response models accept the API's camelCase keys and serialise back to
them (``model_dump(by_alias=True)``) so that cached payloads have the same
shape as the wire format.  Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_API_URL = "https://grokipedia.com"
DEFAULT_TIMEOUT = 30
DEFAULT_CACHE_TTL = 604800  # 7 days
DEFAULT_CACHE_DIR = "~/.grokipedia/cache"


# --- Configuration ---


class ApiConfig(BaseModel):
    """Connection settings for the remote API."""

    url: str = Field(default=DEFAULT_API_URL, description="API base URL")
    timeout: int = Field(default=DEFAULT_TIMEOUT, description="Request timeout in seconds")
    max_retry_delay: Optional[float] = Field(
        default=None,
        description="Upper bound in seconds for a single rate-limit wait",
    )
    deadline: Optional[float] = Field(
        default=None,
        description="Upper bound in seconds for a whole call including retries",
    )


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl: int = Field(default=DEFAULT_CACHE_TTL, description="Cache TTL in seconds")
    dir: str = Field(default=DEFAULT_CACHE_DIR, description="Cache directory")


class OutputConfig(BaseModel):
    """Output preferences."""

    format: str = Field(default="table", description="Default output format")
    color: str = Field(default="auto", description="Colour mode: auto, always, never")


class SearchDefaults(BaseModel):
    """Defaults for the ``search`` command."""

    limit: int = 12
    offset: int = 0
    format: str = "table"


class EditsDefaults(BaseModel):
    """Defaults for the ``edits`` command."""

    limit: int = 20


class CommandsConfig(BaseModel):
    """Per-command defaults."""

    search: SearchDefaults = Field(default_factory=SearchDefaults)
    edits: EditsDefaults = Field(default_factory=EditsDefaults)


class Settings(BaseModel):
    """Effective configuration after all sources have been merged.

    See Also:
        :func:`~grokipedia.config.load_settings` for the precedence chain.
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)

    def cache_active(self) -> bool:
        """Return ``True`` when responses should be read from and written to the cache."""
        return self.cache.enabled and self.cache.ttl > 0


# --- Cache metadata ---


class CacheMetadata(BaseModel):
    """Freshness record stored next to every cached payload as ``<key>.meta``.

    Validated strictly: a file that is not a JSON object with integer
    ``created_at`` and ``ttl`` fields is treated as corrupt.
    """

    model_config = ConfigDict(strict=True)

    created_at: int = Field(description="Write time, seconds since the epoch")
    ttl: int = Field(description="Store TTL in seconds at write time")


# --- API responses ---


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SearchResult(_ApiModel):
    """A single full-text search hit."""

    title: str = ""
    slug: str = ""
    snippet: str = ""
    relevance_score: float = 0.0
    view_count: int = 0


class SearchResponse(_ApiModel):
    """Body of ``/api/full-text-search``."""

    results: list[SearchResult] = Field(default_factory=list)
    total_count: int = 0
    facets: list[Any] = Field(default_factory=list)
    search_time_ms: float = 0.0
    detected_language: str = ""


class Citation(_ApiModel):
    id: str = ""
    title: str = ""
    url: str = ""


class Image(_ApiModel):
    caption: str = ""
    url: str = ""


class PageMetadata(_ApiModel):
    categories: list[str] = Field(default_factory=list)
    last_modified: int = 0
    version: str = ""


class PageStats(_ApiModel):
    total_views: int = 0
    quality_score: float = 0.0


class LinkedPages(_ApiModel):
    indexed_slugs: list[str] = Field(default_factory=list)
    unindexed_slugs: list[str] = Field(default_factory=list)


class PageData(_ApiModel):
    """Page content and metadata."""

    title: str = ""
    slug: str = ""
    content: str = ""
    description: str = ""
    citations: list[Citation] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    metadata: PageMetadata = Field(default_factory=PageMetadata)
    stats: PageStats = Field(default_factory=PageStats)
    linked_pages: LinkedPages = Field(default_factory=LinkedPages)


class PageResponse(_ApiModel):
    """Body of ``/api/page``.  ``found`` is ``False`` for unknown slugs."""

    page: PageData = Field(default_factory=PageData)
    found: bool = False


class TypeaheadResponse(_ApiModel):
    """Body of ``/api/typeahead``."""

    suggestions: list[str] = Field(default_factory=list)


class EditRequest(_ApiModel):
    """A single edit request."""

    id: str = ""
    slug: str = ""
    status: str = ""
    timestamp: int = 0
    editor: str = ""


class EditsResponse(_ApiModel):
    """Body of ``/api/list-edit-requests`` and ``/api/list-edit-requests-by-slug``."""

    edit_requests: list[EditRequest] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    total_count_unfiltered: int = 0
