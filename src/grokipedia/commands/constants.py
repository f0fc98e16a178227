"""Constants command -- ``grokipedia constants``."""

from __future__ import annotations

from typing import Any, Optional

import typer

from grokipedia.client.api import CONSTANTS_PATH
from grokipedia.commands import get_app_context
from grokipedia.context import fetch_cached
from grokipedia.exceptions import UnknownConstantError
from grokipedia.render import CONSTANTS_FORMATS, render_constants, validate_format


def constants_command(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(None, "--key", help="Show a single constant."),
    fmt: str = typer.Option("json", "--format", help="Output format: json, yaml, table."),
) -> None:
    """List API constants and enums.

    The whole constants object is fetched (and cached) even when ``--key``
    selects a single entry.  An unknown key exits with status 2.
    """
    app = get_app_context(ctx)
    validate_format(fmt, CONSTANTS_FORMATS)

    with app.client as client:
        constants = fetch_cached(
            app.cache,
            CONSTANTS_PATH,
            {},
            client.constants,
            dict[str, Any],
        )

    if key is not None:
        if key not in constants:
            raise UnknownConstantError(key)
        constants = {key: constants[key]}
    render_constants(constants, fmt)
