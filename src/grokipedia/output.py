"""Output system with strict stdout/stderr discipline.

* **stdout** -- primary data only (tables, JSON, YAML, markdown).  This is
  what downstream tools pipe and parse.
* **stderr** -- all diagnostics (warnings, errors, debug traces of retries
  and cache hits).  Never contaminates the data stream.
* **Colour** -- ``--color auto`` enables Rich styling only when stdout is a
  TTY and neither ``NO_COLOR`` nor ``TERM=dumb`` is set; ``always`` and
  ``never`` force it on or off.

The module exposes two layers:

1. :class:`OutputManager` -- holds the colour/verbosity state and the two
   Rich consoles.  Created once in :func:`~grokipedia.app.main_callback`
   and installed via :func:`set_output`.
2. Module-level helpers (:func:`info`, :func:`error`, :func:`debug`, ...)
   that delegate to the installed manager.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.table import Table

COLOR_MODES = ("auto", "always", "never")


class OutputManager:
    """Central manager for all CLI output.

    Args:
        color: Colour mode, one of :data:`COLOR_MODES`.
        verbose: Show :meth:`debug` messages on stderr.
        quiet: Suppress :meth:`info` and :meth:`success` messages.
    """

    def __init__(
        self,
        color: str = "auto",
        verbose: bool = False,
        quiet: bool = False,
    ) -> None:
        self._color = _resolve_color(color)
        self._verbose = verbose
        self._quiet = quiet

        self._stdout = Console(
            file=sys.stdout,
            no_color=not self._color,
            force_terminal=True if self._color else None,
            highlight=False,
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=not self._color,
            stderr=True,
            highlight=False,
        )

    @property
    def use_color(self) -> bool:
        """Whether Rich styling is active."""
        return self._color

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Print *data* as indented JSON to stdout."""
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_yaml(self, data: Any) -> None:
        """Print *data* as block-style YAML to stdout."""
        text = yaml.safe_dump(data, sort_keys=True, allow_unicode=True, default_flow_style=False)
        self.print_data(text.rstrip("\n"))

    def print_table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print tabular data to stdout.

        With colour a Rich :class:`~rich.table.Table` is rendered; without
        it the output is tab-separated, one row per line, so that it stays
        easy to ``cut`` and ``awk``.
        """
        if self._color:
            table = Table(show_header=True, header_style="bold cyan", box=None)
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)
            return

        self.print_data("\t".join(headers))
        for row in rows:
            self.print_data("\t".join(row))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``quiet``."""
        if not self._quiet:
            self._emit(message, None)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``quiet``."""
        if not self._quiet:
            self._emit(message, "green")

    def warning(self, message: str) -> None:
        """Print a warning to stderr. Never suppressed."""
        if self._color:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}", markup=True)
        else:
            print(f"Warning: {message}", file=sys.stderr, flush=True)

    def error(self, message: str) -> None:
        """Print an error to stderr. Never suppressed."""
        if self._color:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}", markup=True)
        else:
            print(f"Error: {message}", file=sys.stderr, flush=True)

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown in verbose mode."""
        if self._verbose:
            self._emit(f"[debug] {message}", "dim")

    def _emit(self, message: str, style: Optional[str]) -> None:
        if self._color:
            self._stderr.print(message, style=style, markup=False)
        else:
            print(message, file=sys.stderr, flush=True)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def _resolve_color(mode: str) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    return _is_tty() and not _should_disable_color()


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager`.  Used by the test suite."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
