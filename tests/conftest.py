"""Shared test fixtures for grokipedia.

Provides fake sleepers, clocks and jitter sources so that retry and
expiry behaviour can be tested without waiting, plus helpers for wiring
an :class:`httpx.MockTransport` into the client.
"""

from __future__ import annotations

import random
from typing import Callable

import httpx
import pytest

from grokipedia.output import OutputManager, reset_output, set_output


class RecordingSleeper:
    """Stand-in for ``time.sleep`` that records delays and advances a clock."""

    def __init__(self, clock: "FakeClock | None" = None) -> None:
        self.calls: list[float] = []
        self._clock = clock

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)


class FakeClock:
    """Manually advanced clock usable as ``time.time`` or ``time.monotonic``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float = 0.25) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests():
    """Install a plain, quiet OutputManager and drop it after the test.

    The manager keeps references to ``sys.stdout``/``sys.stderr`` taken at
    creation time, which go stale once pytest's capture is torn down.
    """
    set_output(OutputManager(color="never", quiet=True))
    yield
    reset_output()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def fixed_rng() -> FixedRandom:
    return FixedRandom(0.25)


@pytest.fixture
def make_http():
    """Factory building an :class:`httpx.Client` around a handler function."""
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> httpx.Client:
        client = httpx.Client(
            base_url="https://api.example.com",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def clocked_sleeper(clock: FakeClock) -> RecordingSleeper:
    """A sleeper that advances the shared ``clock`` fixture."""
    return RecordingSleeper(clock)
