"""POSIX pseudo-terminal session built on ``pty``, ``termios`` and ``fork``."""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import pty
import select
import struct
import termios
import tty

from ninjacolor.terminal import PseudoTerminalError

logger = logging.getLogger(__name__)

_WINSIZE = struct.Struct("HHHH")

# Exit status of a child whose exec failed (same as a shell's).
EXEC_FAILED_STATUS = 127


def read_window_size(fd: int) -> bytes | None:
    """Return the packed ``struct winsize`` of *fd*, or ``None``."""
    try:
        return fcntl.ioctl(fd, termios.TIOCGWINSZ, b"\0" * _WINSIZE.size)
    except OSError:
        return None


class PosixPseudoTerminal:
    """A pty pair plus the child process attached to its slave side."""

    def __init__(self) -> None:
        self._master_fd: int | None = None
        self._slave_fd: int | None = None
        self._pid: int | None = None
        self._status: int | None = None

    @property
    def pid(self) -> int | None:
        return self._pid

    @property
    def master_fd(self) -> int | None:
        return self._master_fd

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def allocate(self) -> None:
        try:
            self._master_fd, self._slave_fd = pty.openpty()
        except OSError as exc:
            raise PseudoTerminalError(f"cannot allocate pseudo-terminal: {exc}") from exc
        logger.debug("Allocated pty master=%d slave=%d", self._master_fd, self._slave_fd)

    def spawn_attached(self, argv: list[str], window_size: bytes | None = None) -> int:
        if self._master_fd is None or self._slave_fd is None:
            raise PseudoTerminalError("spawn_attached() called before allocate()")
        if not argv:
            raise PseudoTerminalError("empty command")

        try:
            pid = os.fork()
        except OSError as exc:
            raise PseudoTerminalError(f"cannot fork: {exc}") from exc

        if pid == 0:
            self._exec_child(argv, window_size)  # never returns

        self._pid = pid
        os.close(self._slave_fd)
        self._slave_fd = None
        try:
            tty.setraw(self._master_fd)
        except termios.error as exc:
            logger.debug("Could not set master raw: %s", exc)
        logger.debug("Spawned %s as pid %d", argv, pid)
        return pid

    def _exec_child(self, argv: list[str], window_size: bytes | None) -> None:
        slave = self._slave_fd
        try:
            os.close(self._master_fd)
            os.setsid()
            fcntl.ioctl(slave, termios.TIOCSCTTY, 0)
            if window_size is not None:
                fcntl.ioctl(slave, termios.TIOCSWINSZ, window_size)
            tty.setraw(slave)
            os.dup2(slave, 1)
            os.dup2(slave, 2)
            if slave > 2:
                os.close(slave)
            os.execvp(argv[0], argv)
        except BaseException as exc:  # noqa: BLE001
            try:
                os.write(2, f"ninjacolor: cannot run {argv[0]}: {exc}\n".encode())
            finally:
                os._exit(EXEC_FAILED_STATUS)

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def read_available(self, size: int, wakeup_fd: int | None = None) -> bytes | None:
        if self._master_fd is None:
            return b""
        watched = [self._master_fd]
        if wakeup_fd is not None:
            watched.append(wakeup_fd)

        ready, _, _ = select.select(watched, [], [])
        if self._master_fd not in ready:
            return None
        try:
            return os.read(self._master_fd, size)
        except OSError as exc:
            # Linux reports a closed slave side as EIO
            if exc.errno == errno.EIO:
                return b""
            raise

    def forward_signal(self, signum: int) -> None:
        if self._pid is None or self._status is not None:
            return
        try:
            os.kill(self._pid, signum)
            logger.debug("Forwarded signal %d to pid %d", signum, self._pid)
        except ProcessLookupError:
            logger.debug("Child %d already gone; signal %d dropped", self._pid, signum)

    def resize(self, window_size: bytes) -> None:
        if self._master_fd is None:
            return
        fcntl.ioctl(self._master_fd, termios.TIOCSWINSZ, window_size)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def wait(self) -> int:
        if self._pid is None:
            raise PseudoTerminalError("wait() called before spawn_attached()")
        if self._status is None:
            _, self._status = os.waitpid(self._pid, 0)
            logger.debug("Child %d exited with raw status %#x", self._pid, self._status)
        return self._status

    def close(self) -> None:
        for name in ("_master_fd", "_slave_fd"):
            fd = getattr(self, name)
            if fd is not None:
                os.close(fd)
                setattr(self, name, None)
