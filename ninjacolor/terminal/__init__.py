"""Pseudo-terminal protocol and platform selection.

All OS-specific terminal control (pty allocation, controlling-terminal
assignment, raw mode, descriptor duplication) lives behind the
``PseudoTerminal`` protocol.  The parsing and rendering layers only see
``read_available`` and ``forward_signal``.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable


class PseudoTerminalError(RuntimeError):
    """Raised when the pty pair cannot be allocated or the child spawned."""


class TerminalUnavailableError(PseudoTerminalError):
    """Raised on platforms without a pseudo-terminal implementation."""


@runtime_checkable
class PseudoTerminal(Protocol):
    """Protocol every pseudo-terminal implementation provides.

    Lifecycle: ``allocate`` -> ``spawn_attached`` -> ``read_available``
    until it returns ``b""`` -> ``wait`` -> ``close``.
    """

    @property
    def pid(self) -> int | None:
        """Process id of the spawned child, ``None`` before spawning."""
        ...

    def allocate(self) -> None:
        """Open the master/slave pair."""
        ...

    def spawn_attached(self, argv: list[str], window_size: bytes | None = None) -> int:
        """Start *argv* with the slave as its controlling terminal.

        Returns the child's process id.
        """
        ...

    def read_available(self, size: int, wakeup_fd: int | None = None) -> bytes | None:
        """Block until bytes are available and return them.

        Returns ``b""`` at end of stream and ``None`` when *wakeup_fd*
        became readable first (a signal arrived; no new data).
        """
        ...

    def forward_signal(self, signum: int) -> None:
        """Deliver *signum* to the child process."""
        ...

    def resize(self, window_size: bytes) -> None:
        """Apply a packed ``struct winsize`` to the pty."""
        ...

    def wait(self) -> int:
        """Wait for the child and return its raw wait status."""
        ...

    def close(self) -> None:
        """Release the master side."""
        ...


def create_terminal() -> PseudoTerminal:
    """Return the pseudo-terminal implementation for this platform."""
    if sys.platform == "win32":
        raise TerminalUnavailableError(
            "pseudo-terminals are not supported on this platform"
        )
    from ninjacolor.terminal.posix import PosixPseudoTerminal

    return PosixPseudoTerminal()


def get_window_size() -> bytes | None:
    """Packed window size of the real terminal (stdin, then stdout)."""
    if sys.platform == "win32":
        return None
    from ninjacolor.terminal.posix import read_window_size

    for stream in (sys.stdin, sys.stdout):
        try:
            fd = stream.fileno()
        except (AttributeError, ValueError, OSError):
            continue
        size = read_window_size(fd)
        if size is not None:
            return size
    return None


__all__ = [
    "PseudoTerminal",
    "PseudoTerminalError",
    "TerminalUnavailableError",
    "create_terminal",
    "get_window_size",
]
