"""File-per-entry response cache with TTL expiry.

Each entry is two files in the cache directory:

* ``<key>.json`` -- the exact payload bytes handed to :meth:`CacheStore.set`.
* ``<key>.meta`` -- a :class:`~grokipedia.models.CacheMetadata` record
  (``{"created_at": ..., "ttl": ...}``).

A payload is only ever returned when its metadata is present, parseable
and fresh.  Anything else is repaired by deleting the entry, so a crash
halfway through :meth:`CacheStore.set` or a hand-edited file degrades to a
cache miss instead of stale or garbled output.

Both files are written to a temp file in the same directory and renamed
into place, so a concurrent reader never sees a half-written file.  There
is no locking: two processes writing the same key resolve as
last-writer-wins.
"""

from __future__ import annotations

import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from grokipedia.models import CacheMetadata
from grokipedia.output import get_output

DATA_SUFFIX = ".json"
META_SUFFIX = ".meta"


class CacheStore:
    """On-disk key/payload store with TTL-based expiry and self-healing.

    Args:
        directory: Cache directory.  Created (with parents, mode ``0700``)
            on the first :meth:`set`.
        ttl: Entry lifetime in seconds.  ``ttl <= 0`` disables caching for
            this instance; see :meth:`is_enabled`.
        clock: Returns the current time in epoch seconds.  Injectable so
            tests can age entries without sleeping.

    Example::

        from grokipedia.cache import CacheStore, canonicalize

        store = CacheStore("~/.grokipedia/cache", ttl=3600)
        key = canonicalize("/api/constants")
        if store.is_enabled():
            store.set(key, b'{"a": 1}')
            payload = store.get(key)
    """

    def __init__(
        self,
        directory: str | Path,
        ttl: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._dir = Path(directory).expanduser()
        self._ttl = ttl
        self._clock = clock

    @property
    def directory(self) -> Path:
        """The configured cache directory."""
        return self._dir

    @property
    def ttl(self) -> int:
        """Configured entry lifetime in seconds."""
        return self._ttl

    def is_enabled(self) -> bool:
        """Return ``True`` iff the configured TTL is strictly positive."""
        return self._ttl > 0

    # ------------------------------------------------------------------ #
    # Entry operations
    # ------------------------------------------------------------------ #

    def get(self, key: str) -> Optional[bytes]:
        """Return the cached payload for *key*, or ``None`` on a miss.

        A miss is reported when the payload file is absent, the metadata
        file is absent (the orphan payload is deleted), the metadata is
        unparseable (both files deleted) or, for an enabled store, the
        entry is older than its recorded TTL (both files deleted).
        File-system errors are treated as misses and never raised.
        """
        data_path, meta_path = self._paths(key)
        try:
            payload = data_path.read_bytes()
        except OSError:
            return None

        try:
            raw_meta = meta_path.read_bytes()
        except OSError:
            get_output().debug(f"Cache entry {key} has no metadata, discarding")
            _discard(data_path)
            return None

        try:
            meta = CacheMetadata.model_validate_json(raw_meta)
        except ValidationError:
            get_output().debug(f"Cache entry {key} has corrupt metadata, discarding")
            _discard(data_path)
            _discard(meta_path)
            return None

        if self.is_enabled():
            age = int(self._clock()) - meta.created_at
            if age > meta.ttl:
                _discard(data_path)
                _discard(meta_path)
                return None

        return payload

    def set(self, key: str, payload: bytes) -> None:
        """Store *payload* under *key*.

        The payload file is written before the metadata file.  If writing
        the metadata fails, the payload file is removed again so no undated
        entry survives.

        Raises:
            OSError: If the directory cannot be created or either file
                cannot be written.  Callers treat this as non-fatal.
        """
        self._dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        data_path, meta_path = self._paths(key)

        _atomic_write(data_path, payload)

        meta = CacheMetadata(created_at=int(self._clock()), ttl=self._ttl)
        try:
            _atomic_write(meta_path, meta.model_dump_json().encode("utf-8"))
        except OSError:
            _discard(data_path)
            raise

    def delete(self, key: str) -> None:
        """Remove both files of *key*.  Missing files are not an error."""
        data_path, meta_path = self._paths(key)
        data_path.unlink(missing_ok=True)
        meta_path.unlink(missing_ok=True)

    def clear(self) -> int:
        """Remove every cache-managed file in the directory.

        Only ``*.json`` and ``*.meta`` files are touched; anything else in
        the directory is left alone.  A missing directory counts as already
        clear.

        Returns:
            The number of files removed.
        """
        try:
            entries = list(self._dir.iterdir())
        except FileNotFoundError:
            return 0

        removed = 0
        for path in entries:
            if path.suffix in (DATA_SUFFIX, META_SUFFIX) and path.is_file():
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), ``directory`` (str),
            ``ttl_seconds`` (int) and ``entries`` (number of payload files).
        """
        try:
            entries = sum(1 for p in self._dir.glob(f"*{DATA_SUFFIX}") if p.is_file())
        except OSError:
            entries = 0
        return {
            "enabled": self.is_enabled(),
            "directory": str(self._dir),
            "ttl_seconds": self._ttl,
            "entries": entries,
        }

    def _paths(self, key: str) -> tuple[Path, Path]:
        return self._dir / f"{key}{DATA_SUFFIX}", self._dir / f"{key}{META_SUFFIX}"


def _discard(path: Path) -> None:
    """Best-effort unlink used while repairing an entry during a read."""
    try:
        path.unlink(missing_ok=True)
    except OSError:
        pass


def _atomic_write(path: Path, data: bytes) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temp file lives in the same directory so ``os.replace`` is an
    atomic rename on POSIX.  It is created with mode ``0600`` and keeps
    that mode after the rename.  On any failure the temp file is removed.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
