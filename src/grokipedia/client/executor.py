"""Retrying request executor.

:class:`RequestExecutor` issues one logical API call as at most
:data:`MAX_ATTEMPTS` HTTP requests.  Each response or transport failure is
classified by :mod:`grokipedia.client.classifier`; retryable failures are
retried after a delay, everything else is raised immediately.

Delays:

* ``backoff(0) == 0`` and ``backoff(n) == 2 ** (n - 1) + jitter`` seconds,
  with ``jitter`` drawn uniformly from ``[0, 1)``.
* HTTP 429 waits for the ``Retry-After`` hint when it is positive and
  falls back to ``backoff`` otherwise.  Either value is clamped to
  :attr:`RetryPolicy.max_retry_delay` when one is configured.

An optional :attr:`RetryPolicy.deadline` bounds the whole sequence: every
attempt's timeout is shortened to the time left, and no attempt starts or
sleep begins once the deadline would be crossed.  httpx applies that
timeout to each phase (connect, write, pool and every read) separately,
not to the attempt as a whole, so a server that keeps trickling bytes can
hold a single attempt past the deadline.  The deadline is enforced again
before the next attempt.

A wait longer than :data:`MAX_SLEEP` (one day, e.g. from an absurd
``Retry-After``) is never slept; the error is raised instead.

Sleeping, the clock and the jitter source are constructor arguments so
tests can run the full retry sequence without waiting.
"""

from __future__ import annotations

import enum
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

import httpx

from grokipedia.client.classifier import (
    classify_decode_error,
    classify_request_error,
    classify_response,
)
from grokipedia.exceptions import GrokipediaError, NetworkError, RateLimitedError
from grokipedia.models import DEFAULT_TIMEOUT
from grokipedia.output import get_output

T = TypeVar("T")

MAX_ATTEMPTS = 3
"""Total tries per call (two retries), the same for every endpoint."""

MAX_SLEEP = 24 * 60 * 60
"""Longest single wait in seconds; a longer one ends the call instead."""


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one API call.

    Attributes:
        path: Endpoint path relative to the client's base URL.
        params: Query parameters.  ``None`` values are dropped; list values
            are sent as repeated parameters.
        method: HTTP method.  Every current endpoint uses ``GET``.
        timeout: Per-attempt timeout in seconds.
        resource: Identifier used in error messages, defaults to ``path``.
    """

    path: str
    params: dict[str, Any] = field(default_factory=dict)
    method: str = "GET"
    timeout: float = DEFAULT_TIMEOUT
    resource: Optional[str] = None

    def query(self) -> dict[str, Any]:
        return {k: v for k, v in self.params.items() if v is not None}


@dataclass(frozen=True)
class RetryPolicy:
    """Tunable parts of the retry behaviour.

    Attributes:
        max_retry_delay: Upper bound in seconds for a single rate-limit
            wait.  ``None`` or ``0`` means unbounded.
        deadline: Upper bound in seconds for the whole call, retries and
            waits included.  ``None`` means unbounded.  Checked between
            attempts; within one attempt it only bounds each httpx timeout
            phase.
    """

    max_retry_delay: Optional[float] = None
    deadline: Optional[float] = None


class AttemptOutcome(str, enum.Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


@dataclass
class RequestAttempt:
    """Record of a single try, kept in :attr:`RequestExecutor.attempts`."""

    index: int
    outcome: AttemptOutcome
    delay: Optional[float] = None
    status_code: Optional[int] = None


def backoff(attempt: int, rng: random.Random) -> float:
    """Return the delay in seconds before retrying after try number *attempt* (0-based)."""
    if attempt <= 0:
        return 0.0
    return float(2 ** (attempt - 1)) + rng.random()


class RequestExecutor:
    """Execute API calls with bounded retries.

    Args:
        http: Open :class:`httpx.Client` with the API base URL configured.
        policy: Retry policy; defaults to no delay cap and no deadline.
        sleep: Blocking sleep function, ``time.sleep`` by default.
        rng: Jitter source.  Pass a seeded :class:`random.Random` for
            reproducible delays.
        clock: Monotonic clock used for the deadline.

    Example::

        with httpx.Client(base_url="https://grokipedia.com") as http:
            executor = RequestExecutor(http, RetryPolicy(deadline=60))
            response = executor.execute(RequestDescriptor("/api/constants"))
    """

    def __init__(
        self,
        http: httpx.Client,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._clock = clock
        self.attempts: list[RequestAttempt] = []

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def execute(
        self,
        descriptor: RequestDescriptor,
        decode: Optional[Callable[[httpx.Response], T]] = None,
    ) -> Any:
        """Run *descriptor* to completion.

        Args:
            descriptor: The call to make.
            decode: Optional function applied to the successful response.
                A ``ValueError`` raised by it (which includes JSON and
                Pydantic validation errors) is classified as a parse
                failure.

        Returns:
            The successful :class:`httpx.Response`, or ``decode(response)``
            when *decode* is given.

        Raises:
            GrokipediaError: The classified failure of the last attempt, or
                of the first attempt whose failure is not retryable.
        """
        self.attempts = []
        output = get_output()
        resource = descriptor.resource or descriptor.path
        started = self._clock()
        last_error: Optional[GrokipediaError] = None

        for index in range(MAX_ATTEMPTS):
            timeout = descriptor.timeout
            remaining = self._remaining(started)
            if remaining is not None:
                if remaining <= 0:
                    raise self._deadline_exceeded(index) from last_error
                timeout = min(timeout, remaining)

            status_code: Optional[int] = None
            try:
                response = self._http.request(
                    descriptor.method,
                    descriptor.path,
                    params=descriptor.query(),
                    timeout=timeout,
                )
            except httpx.RequestError as exc:
                error: Optional[GrokipediaError] = classify_request_error(exc, resource)
                cause: Optional[BaseException] = exc
            else:
                status_code = response.status_code
                error = classify_response(response, resource)
                cause = None
                if error is None:
                    self.attempts.append(
                        RequestAttempt(index, AttemptOutcome.SUCCESS, status_code=status_code)
                    )
                    return self._decode(response, decode, resource)

            delay = self._delay_for(error, index)
            last_error = error

            if not error.retryable or index == MAX_ATTEMPTS - 1:
                self.attempts.append(
                    RequestAttempt(index, AttemptOutcome.TERMINAL, status_code=status_code)
                )
                raise error from cause

            if delay > MAX_SLEEP or (
                remaining is not None and delay >= self._remaining(started)
            ):
                output.debug(
                    f"Not retrying {descriptor.method} {descriptor.path}: "
                    f"{delay:.2f}s wait exceeds the time allowed"
                )
                self.attempts.append(
                    RequestAttempt(index, AttemptOutcome.TERMINAL, status_code=status_code)
                )
                raise error from cause

            self.attempts.append(
                RequestAttempt(index, AttemptOutcome.RETRYABLE, delay=delay, status_code=status_code)
            )
            output.debug(
                f"{error}, retrying {descriptor.method} {descriptor.path} in {delay:.2f}s "
                f"(attempt {index + 1}/{MAX_ATTEMPTS})"
            )
            if delay > 0:
                self._sleep(delay)

        # The final iteration always returns or raises.
        raise AssertionError("retry loop exited without a result")  # pragma: no cover

    def _delay_for(self, error: GrokipediaError, index: int) -> float:
        if not isinstance(error, RateLimitedError):
            return backoff(index, self._rng)

        delay = float(error.retry_after) if error.retry_after > 0 else backoff(index, self._rng)
        cap = self._policy.max_retry_delay
        if cap and delay > cap:
            delay = cap
        return delay

    def _remaining(self, started: float) -> Optional[float]:
        if self._policy.deadline is None:
            return None
        return self._policy.deadline - (self._clock() - started)

    def _deadline_exceeded(self, attempts_made: int) -> NetworkError:
        return NetworkError(
            f"deadline of {self._policy.deadline}s exceeded after {attempts_made} attempt(s)"
        )

    @staticmethod
    def _decode(
        response: httpx.Response,
        decode: Optional[Callable[[httpx.Response], T]],
        resource: str,
    ) -> Any:
        if decode is None:
            return response
        try:
            return decode(response)
        except ValueError as exc:
            raise classify_decode_error(exc, resource) from exc
