"""Tests for the error taxonomy and exit-code mapping."""

from __future__ import annotations

import pytest

from grokipedia.exceptions import (
    EXIT_CODES,
    ConfigError,
    ErrorKind,
    GenericError,
    GrokipediaError,
    InvalidArgsError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnknownConstantError,
)
from grokipedia.exit_codes import (
    EXIT_GENERIC_ERROR,
    EXIT_INVALID_ARGS,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
    EXIT_SUCCESS,
)


class TestExitCodes:
    def test_values(self) -> None:
        assert (EXIT_SUCCESS, EXIT_GENERIC_ERROR, EXIT_NOT_FOUND) == (0, 1, 2)
        assert (EXIT_RATE_LIMITED, EXIT_INVALID_ARGS) == (3, 4)

    def test_every_kind_mapped(self) -> None:
        assert set(EXIT_CODES) == set(ErrorKind)

    @pytest.mark.parametrize(
        "error, code",
        [
            (NotFoundError("x"), 2),
            (UnknownConstantError("K"), 2),
            (RateLimitedError(5), 3),
            (InvalidArgsError("bad"), 4),
            (NetworkError("down"), 1),
            (ServerError(503), 1),
            (GenericError("oops"), 1),
            (ConfigError("bad yaml"), 1),
            (GrokipediaError("base"), 1),
        ],
    )
    def test_exit_code_follows_kind(self, error: GrokipediaError, code: int) -> None:
        assert error.exit_code == code
        assert EXIT_CODES[error.kind] == code


class TestMessages:
    def test_not_found(self) -> None:
        assert str(NotFoundError("Python")) == "Page not found: Python"

    def test_unknown_constant(self) -> None:
        error = UnknownConstantError("MAX_LIMIT")
        assert str(error) == "Unknown constant: MAX_LIMIT"
        assert isinstance(error, NotFoundError)

    def test_rate_limited_with_and_without_hint(self) -> None:
        assert str(RateLimitedError(30)) == "Rate limited. Retry after 30 seconds"
        assert str(RateLimitedError()) == "Rate limited. Please try again later"

    def test_server_and_network(self) -> None:
        assert str(ServerError(502)) == "Server error: HTTP 502"
        assert str(NetworkError("timed out")) == "Network error: timed out"

    def test_retryable_defaults_false(self) -> None:
        assert not GrokipediaError("x").retryable
        assert RateLimitedError(1, retryable=True).retryable
