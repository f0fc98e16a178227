"""HTTP client layer for grokipedia.

* :class:`GrokipediaClient` -- one typed method per API endpoint, used as
  a context manager around an :class:`httpx.Client`.
* :class:`RequestExecutor` -- runs a :class:`RequestDescriptor` as up to
  :data:`MAX_ATTEMPTS` tries with backoff, jitter and ``Retry-After``
  handling.
* :mod:`grokipedia.client.classifier` -- maps transport errors, HTTP
  statuses and undecodable bodies to
  :class:`~grokipedia.exceptions.GrokipediaError` subclasses.

Example::

    from grokipedia.client import GrokipediaClient
    from grokipedia.models import ApiConfig

    with GrokipediaClient(ApiConfig()) as client:
        page = client.page("Python", include_content=True, validate_links=False)
"""

from grokipedia.client.api import GrokipediaClient
from grokipedia.client.executor import (
    MAX_ATTEMPTS,
    RequestAttempt,
    RequestDescriptor,
    RequestExecutor,
    RetryPolicy,
)

__all__ = [
    "GrokipediaClient",
    "MAX_ATTEMPTS",
    "RequestAttempt",
    "RequestDescriptor",
    "RequestExecutor",
    "RetryPolicy",
]
