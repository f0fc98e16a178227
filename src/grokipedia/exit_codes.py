"""Numeric process exit codes surfaced by the ``grokipedia`` CLI.

Each constant is referenced by :data:`grokipedia.exceptions.EXIT_CODES`,
which maps every :class:`~grokipedia.exceptions.ErrorKind` to exactly one
of them.  Shell scripts can branch on the exit status without parsing
stderr.

Example::

    $ grokipedia page no-such-page
    $ echo $?
    2   # EXIT_NOT_FOUND
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_ERROR = 1
"""An unclassified error occurred (network, server or unexpected response)."""

EXIT_NOT_FOUND = 2
"""The requested page or constant does not exist."""

EXIT_RATE_LIMITED = 3
"""The API kept answering HTTP 429 after all retries."""

EXIT_INVALID_ARGS = 4
"""The command was invoked with invalid flags or arguments."""
