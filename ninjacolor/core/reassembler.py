"""Stream reassembler — turns raw pty bytes into rendered units.

Bytes read from the pseudo-terminal are appended to a working buffer.
After every append the extraction loop drains each complete unit from
the front of the buffer:

1. a status unit (optional ``\\r``, counter, description, ``\\n`` or
   ``ESC [ K``),
2. otherwise a line (leading blank lines plus one ``\\n``-terminated
   line),
3. otherwise nothing: the tail is a partial unit and stays buffered
   until more bytes arrive.

Bytes leave the buffer only once a complete unit has matched, so the
rendered output is independent of how the stream was chunked.
"""

from __future__ import annotations

import logging
import re
from typing import BinaryIO

from ninjacolor.core.mirror import TeeMirror
from ninjacolor.core.renderer import LineRenderer
from ninjacolor.core.status_pattern import StatusPattern

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(rb"(?P<blank>\n*)(?P<line>[^\n]*)\n")

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _decode(data: bytes) -> str:
    return data.decode(_ENCODING, _ERRORS)


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


class StreamReassembler:
    """Buffered line reassembly, classification and rendering.

    Parameters
    ----------
    status_pattern:
        Compiled ``NINJA_STATUS`` matcher.
    renderer:
        Renderer holding the style table and (optional) classifier.
    output:
        Binary stream the rendered bytes are written to.
    mirror:
        Optional ``TeeMirror`` receiving a plain-text copy.
    """

    def __init__(
        self,
        status_pattern: StatusPattern,
        renderer: LineRenderer,
        output: BinaryIO,
        mirror: TeeMirror | None = None,
    ) -> None:
        self._status = status_pattern
        self._renderer = renderer
        self._output = output
        self._mirror = mirror
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes buffered but not yet extracted."""
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> int:
        """Append *chunk* and render every complete unit.

        Returns the number of units extracted.
        """
        self._buffer += chunk
        rendered: list[str] = []
        count = 0
        while True:
            text = self._extract_status() or self._extract_line()
            if text is None:
                break
            rendered.append(text)
            count += 1
        if rendered:
            self._output.write(_encode("".join(rendered)))
            self._output.flush()
        logger.debug(
            "feed: %d byte(s) in, %d unit(s) out, %d byte(s) pending",
            len(chunk),
            count,
            len(self._buffer),
        )
        return count

    def finish(self) -> None:
        """Flush a trailing partial unit verbatim at end of stream."""
        if not self._buffer:
            return
        tail = _decode(bytes(self._buffer))
        self._buffer.clear()
        self._output.write(_encode(tail))
        self._output.flush()
        if self._mirror is not None:
            self._mirror.write_unit(tail)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def _extract_status(self) -> str | None:
        m = self._status.match(self._buffer)
        if m is None:
            return None
        del self._buffer[: m.end]
        counter = _decode(m.counter)
        description = _decode(m.description)
        if self._mirror is not None:
            self._mirror.write_unit(counter + description + "\n")
        return self._renderer.render_status(
            _decode(m.prefix), counter, description, _decode(m.terminator)
        )

    def _extract_line(self) -> str | None:
        m = _LINE_RE.match(self._buffer)
        if m is None:
            return None
        blank_end = m.end("blank")
        if blank_end and self._status.match(self._buffer, blank_end) is not None:
            # blank lines directly before a status unit are a unit of their own
            blank = _decode(bytes(self._buffer[:blank_end]))
            del self._buffer[:blank_end]
            if self._mirror is not None:
                self._mirror.write_unit(blank)
            return blank
        # groups slice the live buffer, so read them before consuming
        blank = _decode(m.group("blank"))
        line = _decode(m.group("line"))
        del self._buffer[: m.end()]
        if self._mirror is not None:
            self._mirror.write_unit(blank + line + "\n")
        return blank + self._renderer.render_line(line)
