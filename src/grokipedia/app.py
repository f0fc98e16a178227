"""Typer application and CLI entry point for grokipedia.

The root callback resolves :class:`~grokipedia.models.Settings` from the
config file, environment and global flags, installs the
:class:`~grokipedia.output.OutputManager`, and stores an
:class:`~grokipedia.context.AppContext` in ``ctx.obj`` for the commands.

:func:`run` maps every outcome to a process exit code:

* :class:`~grokipedia.exceptions.GrokipediaError` -- its ``exit_code``.
* Click usage errors (unknown option, missing argument) -- ``4``, the
  same as other invalid arguments.
* Anything else -- a crash log under ``~/.grokipedia/logs`` and ``1``.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from grokipedia import __version__
from grokipedia.commands.cache import cache_app
from grokipedia.commands.constants import constants_command
from grokipedia.commands.edits import edits_by_slug_command, edits_command
from grokipedia.commands.page import page_command
from grokipedia.commands.search import search_command, typeahead_command
from grokipedia.exit_codes import EXIT_GENERIC_ERROR, EXIT_INVALID_ARGS, EXIT_SUCCESS


def _click_exception_class(name: str) -> type[Exception]:
    """Return click's exception class *name* from the build typer runs on.

    Recent typer releases ship their own copy of click, so the classes
    raised by ``app()`` are looked up through ``typer.BadParameter``
    rather than imported from ``click``.
    """
    return next(cls for cls in typer.BadParameter.__mro__ if cls.__name__ == name)


_UsageError = _click_exception_class("UsageError")
_ClickException = _click_exception_class("ClickException")

app = typer.Typer(
    name="grokipedia",
    help="A CLI for the Grokipedia API.",
    no_args_is_help=True,
    add_completion=True,
)

app.command("search")(search_command)
app.command("page")(page_command)
app.command("edits")(edits_command)
app.command("edits-by-slug")(edits_by_slug_command)
app.command("typeahead")(typeahead_command)
app.command("constants")(constants_command)
app.add_typer(cache_app, name="cache", help="Inspect or clear the response cache.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"grokipedia {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default ~/.grokipedia/config.yml)."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="API base URL (env: GROKIPEDIA_API_URL)."
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", help="Request timeout in seconds (env: GROKIPEDIA_TIMEOUT)."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Disable caching (env: GROKIPEDIA_NO_CACHE)."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Cache directory (env: GROKIPEDIA_CACHE_DIR)."
    ),
    cache_ttl: Optional[int] = typer.Option(
        None, "--cache-ttl", help="Cache TTL in seconds (env: GROKIPEDIA_CACHE_TTL)."
    ),
    max_retry_delay: Optional[float] = typer.Option(
        None, "--max-retry-delay", help="Cap in seconds for a single rate-limit wait."
    ),
    deadline: Optional[float] = typer.Option(
        None, "--deadline", help="Overall time limit in seconds per API call, retries included."
    ),
    color: Optional[str] = typer.Option(
        None, "--color", help="Color mode: auto, always, never (env: GROKIPEDIA_COLOR)."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", envvar="GROKIPEDIA_VERBOSE", help="Enable debug output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Args:
        ctx: Typer invocation context.  ``ctx.obj["app"]`` receives the
            :class:`~grokipedia.context.AppContext`.
    """
    from grokipedia.config import ConfigOverrides, load_settings
    from grokipedia.context import AppContext
    from grokipedia.exceptions import InvalidArgsError
    from grokipedia.output import COLOR_MODES, OutputManager, debug, set_output

    if color is not None and color not in COLOR_MODES:
        raise InvalidArgsError(
            f"invalid color mode '{color}' (allowed: {', '.join(COLOR_MODES)})"
        )

    settings = load_settings(
        ConfigOverrides(
            config_file=config_file,
            api_url=api_url,
            timeout=timeout,
            no_cache=no_cache,
            cache_dir=cache_dir,
            cache_ttl=cache_ttl,
            max_retry_delay=max_retry_delay,
            deadline=deadline,
            color=color,
        )
    )
    set_output(OutputManager(color=settings.output.color, verbose=verbose, quiet=quiet))
    debug(f"API: {settings.api.url} (timeout {settings.api.timeout}s)")

    ctx.ensure_object(dict)
    ctx.obj["app"] = AppContext.from_settings(settings)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback under ``~/.grokipedia/logs`` and return its path."""
    from grokipedia.config import get_config_dir

    logs_dir = get_config_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def run(args: Optional[list[str]] = None) -> int:
    """Invoke the CLI with *args* and return the process exit code.

    Args:
        args: Command-line arguments without the program name; defaults to
            ``sys.argv[1:]``.
    """
    from grokipedia.exceptions import GrokipediaError
    from grokipedia.output import error

    try:
        result = app(args=args, prog_name="grokipedia", standalone_mode=False)
    except _UsageError as exc:
        exc.show()
        return EXIT_INVALID_ARGS
    except _ClickException as exc:
        exc.show()
        return exc.exit_code
    except typer.Abort:
        sys.stderr.write("\nCancelled.\n")
        return 130
    except GrokipediaError as exc:
        error(str(exc))
        return exc.exit_code
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        return EXIT_GENERIC_ERROR

    return result if isinstance(result, int) else EXIT_SUCCESS


def main() -> None:
    """Console-script entry point."""
    _setup_signal_handlers()
    sys.exit(run())
