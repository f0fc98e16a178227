"""Error taxonomy for grokipedia.

Every failure the CLI can report is a :class:`GrokipediaError` tagged with
one member of the closed :class:`ErrorKind` enum.  The kind is the only
thing that decides the process exit code: :data:`EXIT_CODES` maps each
kind to a constant from :mod:`grokipedia.exit_codes`, and
:func:`grokipedia.app.main` exits with ``exc.exit_code``.

Subclass hierarchy::

    GrokipediaError             (GENERIC, exit 1)
    +-- NotFoundError           (NOT_FOUND, exit 2)
    |   +-- UnknownConstantError
    +-- RateLimitedError        (RATE_LIMITED, exit 3)
    +-- InvalidArgsError        (INVALID_ARGS, exit 4)
    +-- NetworkError            (NETWORK, exit 1)
    +-- ServerError             (SERVER_ERROR, exit 1)
    +-- GenericError            (GENERIC, exit 1)
    +-- ConfigError             (GENERIC, exit 1)

The ``retryable`` flag is set by the error classifier and consulted by the
request executor; it has no meaning outside a retry loop.
"""

from __future__ import annotations

import enum
from typing import Optional

from grokipedia.exit_codes import (
    EXIT_GENERIC_ERROR,
    EXIT_INVALID_ARGS,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
)


class ErrorKind(str, enum.Enum):
    """Closed set of failure classifications."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    INVALID_ARGS = "invalid_args"
    NETWORK = "network"
    SERVER_ERROR = "server_error"
    GENERIC = "generic"


EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: EXIT_NOT_FOUND,
    ErrorKind.RATE_LIMITED: EXIT_RATE_LIMITED,
    ErrorKind.INVALID_ARGS: EXIT_INVALID_ARGS,
    ErrorKind.NETWORK: EXIT_GENERIC_ERROR,
    ErrorKind.SERVER_ERROR: EXIT_GENERIC_ERROR,
    ErrorKind.GENERIC: EXIT_GENERIC_ERROR,
}
"""Exit code for every :class:`ErrorKind`. Must cover the whole enum."""


class GrokipediaError(Exception):
    """Base exception for all grokipedia errors.

    Subclasses set a class-level :attr:`kind`; the exit code is derived
    from it through :data:`EXIT_CODES` rather than stored separately.

    Args:
        message: Human-readable error description printed to stderr.
        retryable: Whether another attempt may succeed.  Only the request
            executor reads this.
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable

    @property
    def exit_code(self) -> int:
        """Process exit code for this error's kind."""
        return EXIT_CODES[self.kind]


class NotFoundError(GrokipediaError):
    """Raised on HTTP 404 or when the API reports a page as not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str) -> None:
        super().__init__(f"Page not found: {resource}")
        self.resource = resource


class UnknownConstantError(NotFoundError):
    """Raised when ``constants --key`` names a key the API does not return."""

    def __init__(self, key: str) -> None:
        GrokipediaError.__init__(self, f"Unknown constant: {key}")
        self.resource = key


class RateLimitedError(GrokipediaError):
    """Raised when the API answers HTTP 429.

    Args:
        retry_after: Seconds the server asked us to wait, ``0`` if the
            response carried no usable ``Retry-After`` header.
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, retry_after: int = 0, retryable: bool = False) -> None:
        if retry_after > 0:
            message = f"Rate limited. Retry after {retry_after} seconds"
        else:
            message = "Rate limited. Please try again later"
        super().__init__(message, retryable=retryable)
        self.retry_after = retry_after


class InvalidArgsError(GrokipediaError):
    """Raised for invalid CLI flags or arguments (bad format, out-of-range limit)."""

    kind = ErrorKind.INVALID_ARGS


class NetworkError(GrokipediaError):
    """Raised on transport-level failures (timeout, DNS, connection refused)."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(f"Network error: {message}", retryable=retryable)


class ServerError(GrokipediaError):
    """Raised when the API keeps answering 500, 502 or 503."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int, retryable: bool = False) -> None:
        super().__init__(f"Server error: HTTP {status_code}", retryable=retryable)
        self.status_code = status_code


class GenericError(GrokipediaError):
    """Raised for any other 4xx status and for undecodable response bodies.

    Args:
        message: Description of the failure.
        status_code: HTTP status, when the failure came from a response.
        body: Response body text (truncated), when available.
    """

    kind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConfigError(GrokipediaError):
    """Raised for unreadable or invalid configuration files."""

    kind = ErrorKind.GENERIC
