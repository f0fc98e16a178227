"""Failure classification for API calls.

Maps the three ways a call can go wrong -- a transport exception, an
error status, or a success status with a body we cannot decode -- onto
exactly one :class:`~grokipedia.exceptions.GrokipediaError` subclass.
The returned error's ``retryable`` flag tells
:class:`~grokipedia.client.executor.RequestExecutor` whether another
attempt is worthwhile.

=====================  ====================  =========
Condition              Error                 Retryable
=====================  ====================  =========
timeout / network      ``NetworkError``      yes
redirect loop          ``NetworkError``      no
other transport error  ``NetworkError``      no
HTTP 404               ``NotFoundError``     no
HTTP 429               ``RateLimitedError``  yes
HTTP 500 / 502 / 503   ``ServerError``       yes
other HTTP >= 400      ``GenericError``      no
undecodable body       ``GenericError``      no
bad content encoding   ``GenericError``      no
=====================  ====================  =========
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

import httpx

from grokipedia.exceptions import (
    GenericError,
    GrokipediaError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)

RETRYABLE_SERVER_STATUSES = frozenset({500, 502, 503})

_RETRYABLE_TRANSPORT = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)

_DIGITS = re.compile(r"[0-9]+")

_BODY_PREVIEW = 200


def parse_retry_after(headers: Mapping[str, str]) -> int:
    """Parse the ``Retry-After`` header as whole seconds.

    Only a plain base-10 non-negative integer is accepted; HTTP-date values,
    signs and garbage yield ``0`` (no hint).
    """
    value = headers.get("Retry-After")
    if value is None:
        return 0
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        return 0
    return int(value)


def classify_request_error(exc: httpx.RequestError, resource: str) -> GrokipediaError:
    """Classify an exception raised while sending a request or reading its response.

    A body that cannot be decoded (bad ``Content-Encoding``) is a parse
    failure like any other undecodable body.  Redirect loops and the
    remaining transport errors are network errors; only timeouts and
    connection-level failures are worth another attempt.
    """
    if isinstance(exc, httpx.DecodingError):
        return classify_decode_error(exc, resource)
    retryable = isinstance(exc, _RETRYABLE_TRANSPORT)
    detail = str(exc) or type(exc).__name__
    return NetworkError(detail, retryable=retryable)


def classify_response(response: httpx.Response, resource: str) -> Optional[GrokipediaError]:
    """Classify an HTTP response.

    Args:
        response: The response received.
        resource: Identifier used in error messages (endpoint path or slug).

    Returns:
        ``None`` for a success status (below 400), otherwise the error that
        describes the failure.
    """
    status = response.status_code
    if status < 400:
        return None
    if status == 404:
        return NotFoundError(resource)
    if status == 429:
        return RateLimitedError(parse_retry_after(response.headers), retryable=True)
    if status in RETRYABLE_SERVER_STATUSES:
        return ServerError(status, retryable=True)

    body = response.text[:_BODY_PREVIEW] if response.content else ""
    message = f"API error: {status} - {body}" if body else f"API error: {status}"
    return GenericError(message, status_code=status, body=body)


def classify_decode_error(exc: Exception, resource: str) -> GenericError:
    """Classify a failure to decode or validate a success-status body."""
    return GenericError(f"Failed to parse response from {resource}: {exc}")
