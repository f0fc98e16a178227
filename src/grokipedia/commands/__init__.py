"""Command implementations for the grokipedia CLI.

Each module defines plain Typer command functions that
:mod:`grokipedia.app` registers on the root application.  Commands pull
their :class:`~grokipedia.context.AppContext` from ``ctx.obj`` (populated
by :func:`~grokipedia.app.main_callback`) instead of reaching for global
state.
"""

from __future__ import annotations

import typer

from grokipedia.context import AppContext
from grokipedia.exceptions import InvalidArgsError


def get_app_context(ctx: typer.Context) -> AppContext:
    """Return the :class:`AppContext` stored by the root callback."""
    return ctx.ensure_object(dict)["app"]


def check_range(name: str, value: int, low: int, high: int) -> None:
    """Raise :class:`InvalidArgsError` unless ``low <= value <= high``."""
    if not low <= value <= high:
        raise InvalidArgsError(f"--{name} must be between {low} and {high}, got {value}")


def check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise InvalidArgsError(f"--{name} must not be negative, got {value}")
