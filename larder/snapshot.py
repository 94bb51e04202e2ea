"""File-backed universe snapshots.

A snapshot is a universe document in the registry's own ``/universe`` wire
format, so a file saved by ``larder universe --output`` and a raw download
of the endpoint are interchangeable.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from larder.client.errors import MalformedResponseError, SnapshotError
from larder.client.parse import parse_universe, universe_to_wire
from larder.models.universe import Universe

_log = structlog.get_logger(component="snapshot")


class SnapshotStore:
    """Reads and atomically replaces a single universe snapshot file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> Universe | None:
        """Return the stored universe, or None when no snapshot was saved yet."""
        if not self.exists():
            return None
        return load_universe(self._path)

    def save(self, universe: Universe) -> None:
        """Write *universe* to a temp file in the same directory, then rename over the snapshot."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
        except OSError as exc:
            raise SnapshotError(str(self._path), f"cannot create temp file ({exc})") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(universe_to_wire(universe), fh, indent=2, sort_keys=True)
                fh.write("\n")
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise SnapshotError(str(self._path), f"write failed ({exc})") from exc
        _log.info("snapshot_saved", path=str(self._path), packages=len(universe.packages))


def load_universe(path: str | Path) -> Universe:
    """Parse the universe document stored at *path*."""
    source = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(source, f"read failed ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(source, f"not valid UTF-8 ({exc})") from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise SnapshotError(source, f"invalid JSON ({exc})") from exc
    try:
        universe = parse_universe(data, source)
    except MalformedResponseError as exc:
        raise SnapshotError(source, exc.detail) from exc
    _log.debug("snapshot_loaded", path=source, packages=len(universe.packages))
    return universe
