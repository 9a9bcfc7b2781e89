"""Session coordinator — read loop, signal forwarding and exit status.

The coordinator owns the lifecycle of one wrapped run:

1. install SIGINT / SIGWINCH handlers and a ``set_wakeup_fd`` pipe,
2. allocate the pty and spawn the child attached to it,
3. loop: read bytes, poll the signal flags, feed the reassembler,
4. at end of stream flush the reassembler, reap the child, close the
   pty, restore the previous handlers and return the exit code.

A SIGINT never stops the loop.  The handler only raises a flag; the
loop forwards the signal to the child and keeps reading, and the
child's own reaction (usually ``ninja: build stopped: interrupted by
user.``) ends the stream.
"""

from __future__ import annotations

import logging
import os
import signal
from collections.abc import Callable
from types import FrameType

from ninjacolor.core.reassembler import StreamReassembler
from ninjacolor.terminal import PseudoTerminal, get_window_size

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE = 4096


class InterruptFlag:
    """Counter raised from a signal handler and consumed by the loop.

    The handler runs on the main thread between bytecodes, so a plain
    integer is enough; no lock is taken inside the handler.
    """

    def __init__(self) -> None:
        self._pending = 0

    def raise_(self) -> None:
        self._pending += 1

    def consume(self) -> bool:
        """Return ``True`` (once) if the flag was raised since last call."""
        pending, self._pending = self._pending, 0
        return pending > 0


def exit_code_from_status(status: int) -> int:
    """Map a raw ``waitpid`` status to a process exit code.

    A normal exit yields the child's own code (the status shifted right
    by eight bits).  Death by signal *N* yields ``128 + N`` so that it
    can never read as success.
    """
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return 128 + os.WTERMSIG(status)
    return (status >> 8) or 1


class SessionCoordinator:
    """Runs one child under a pseudo-terminal and renders its output.

    Parameters
    ----------
    terminal:
        A fresh ``PseudoTerminal`` (not yet allocated).
    reassembler:
        Receives every chunk read from the terminal.
    read_size:
        Maximum number of bytes per read.
    window_size:
        Callable returning the current packed window size (or ``None``).
    """

    def __init__(
        self,
        terminal: PseudoTerminal,
        reassembler: StreamReassembler,
        *,
        read_size: int = DEFAULT_READ_SIZE,
        window_size: Callable[[], bytes | None] = get_window_size,
    ) -> None:
        self._terminal = terminal
        self._reassembler = reassembler
        self._read_size = read_size
        self._window_size = window_size
        self.interrupted = InterruptFlag()
        self.resized = InterruptFlag()
        self._previous_handlers: dict[int, object] = {}
        self._wakeup_r: int | None = None
        self._wakeup_w: int | None = None
        self._previous_wakeup_fd: int = -1

    # ------------------------------------------------------------------
    # Signal plumbing
    # ------------------------------------------------------------------

    def _on_interrupt(self, signum: int, frame: FrameType | None) -> None:
        self.interrupted.raise_()

    def _on_resize(self, signum: int, frame: FrameType | None) -> None:
        self.resized.raise_()

    def _install_signal_handlers(self) -> None:
        self._wakeup_r, self._wakeup_w = os.pipe()
        os.set_blocking(self._wakeup_r, False)
        os.set_blocking(self._wakeup_w, False)
        self._previous_wakeup_fd = signal.set_wakeup_fd(self._wakeup_w)

        self._previous_handlers[signal.SIGINT] = signal.signal(
            signal.SIGINT, self._on_interrupt
        )
        if hasattr(signal, "SIGWINCH"):
            self._previous_handlers[signal.SIGWINCH] = signal.signal(
                signal.SIGWINCH, self._on_resize
            )

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        signal.set_wakeup_fd(self._previous_wakeup_fd)
        for fd in (self._wakeup_r, self._wakeup_w):
            if fd is not None:
                os.close(fd)
        self._wakeup_r = self._wakeup_w = None

    def _drain_wakeup(self) -> None:
        if self._wakeup_r is None:
            return
        try:
            while os.read(self._wakeup_r, 512):
                pass
        except BlockingIOError:
            pass

    def _handle_signals(self) -> None:
        if self.interrupted.consume():
            logger.debug("SIGINT received; forwarding to child")
            self._terminal.forward_signal(signal.SIGINT)
        if self.resized.consume():
            size = self._window_size()
            if size is not None:
                self._terminal.resize(size)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self, argv: list[str]) -> int:
        """Run *argv* to completion and return its exit code."""
        self._install_signal_handlers()
        try:
            self._terminal.allocate()
            self._terminal.spawn_attached(argv, self._window_size())
            self._pump()
            self._reassembler.finish()
            status = self._terminal.wait()
        finally:
            self._terminal.close()
            self._restore_signal_handlers()

        code = exit_code_from_status(status)
        logger.debug("%s finished: raw status %#x, exit code %d", argv[0], status, code)
        return code

    def _pump(self) -> None:
        while True:
            chunk = self._terminal.read_available(self._read_size, self._wakeup_r)
            self._handle_signals()
            if chunk is None:
                # a signal woke us up; no new data, keep looping
                self._drain_wakeup()
                continue
            if not chunk:
                break
            self._reassembler.feed(chunk)
