"""grokipedia -- command-line client for the Grokipedia content API.

The package wraps the public Grokipedia endpoints (full-text search, page
retrieval, edit-request listing, typeahead and constants) behind a Typer
CLI.  Two subsystems do the heavy lifting:

* :mod:`grokipedia.client` -- a retrying request executor that turns one
  logical API call into a bounded sequence of attempts with exponential
  backoff, jitter and ``Retry-After`` handling.
* :mod:`grokipedia.cache` -- a file-per-entry response cache keyed by a
  canonical hash of the endpoint and its parameters, with TTL expiry and
  self-healing on corruption.

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models for configuration and API responses.
    config: Config file, environment and flag precedence resolution.
    context: Per-invocation context and the cache-then-network fetch path.
    exceptions: Error taxonomy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr formatting with Rich support.
    render: Per-command output renderers.
"""

__version__ = "0.4.0"
