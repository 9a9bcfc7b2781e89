"""Tee mirror — plain-text copy of everything rendered to the terminal.

The file is opened once and truncated.  Every extracted unit is stripped
of ANSI escape sequences, appended and flushed immediately so that a
killed process leaves a complete mirror behind.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from ninjacolor.core.ansi import strip_ansi

logger = logging.getLogger(__name__)


class MirrorOpenError(RuntimeError):
    """Raised when the mirror file cannot be opened for writing."""


class TeeMirror:
    """Appends ANSI-stripped text units to a file.

    Parameters
    ----------
    path:
        Destination file.  Existing content is truncated.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        try:
            self._fh: BinaryIO | None = open(self._path, "wb")  # noqa: SIM115
        except OSError as exc:
            raise MirrorOpenError(f"cannot open tee file {self._path}: {exc}") from exc
        logger.debug("TeeMirror: writing to %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._fh is None

    def write_unit(self, text: str) -> None:
        """Strip escapes from *text*, append it and flush."""
        if self._fh is None:
            raise ValueError("write to closed TeeMirror")
        self._fh.write(strip_ansi(text).encode("utf-8", "surrogateescape"))
        self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> TeeMirror:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
