"""Compile ninja's ``NINJA_STATUS`` template into a byte-level matcher.

The template is split into literal text and ``%x`` placeholders.
Literal text is escaped before the placeholders are substituted with
their sub-patterns, so characters such as ``[`` in the default template
``[%f/%t] `` are matched literally.

Placeholders
------------
- ``%s %t %r %u %f``  : started / total / running / unstarted / finished
- ``%c %o``           : current and overall rate (may be ``?``)
- ``%e``              : elapsed seconds, e.g. ``1.234``
- ``%w %E %W``        : elapsed / ETA durations, e.g. ``01:23``
- ``%p``              : percentage, e.g. `` 5%`` or ``42%``
- ``%%``              : a literal ``%``
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_STATUS_TEMPLATE = "[%f/%t] "

_COUNTER = rb"\d+"
_RATE = rb"(?:\d+(?:\.\d+)?|\?)"
_DURATION = rb"(?:\d+(?::\d+)*(?:\.\d+)?|\?)"
# Two-character field (two digits, or space + digit) or ninja's %3i form.
_PERCENT = rb"(?:\d\d| \d| {0,2}\d{1,3})%"

_PLACEHOLDERS: dict[str, bytes] = {
    "s": _COUNTER,
    "t": _COUNTER,
    "r": _COUNTER,
    "u": _COUNTER,
    "f": _COUNTER,
    "c": _RATE,
    "o": _RATE,
    "e": _DURATION,
    "w": _DURATION,
    "E": _DURATION,
    "W": _DURATION,
    "p": _PERCENT,
    "%": re.escape(b"%"),
}

_TOKEN_RE = re.compile(r"%(.)", re.DOTALL)

ERASE_TO_EOL = b"\x1b[K"


class StatusMatch(BaseModel):
    """One recognised status unit at the front of the buffer."""

    model_config = ConfigDict(frozen=True)

    prefix: bytes  # b"\r" or b""
    counter: bytes
    description: bytes
    terminator: bytes  # b"\n" or ERASE_TO_EOL
    end: int


class StatusPattern:
    """Compiled, immutable matcher for one status template."""

    def __init__(self, template: str, regex: re.Pattern[bytes]) -> None:
        self._template = template
        self._regex = regex

    def match(self, buffer: bytes | bytearray, pos: int = 0) -> StatusMatch | None:
        """Match a complete status unit at *pos* (default: start) of *buffer*."""
        m = self._regex.match(buffer, pos)
        if m is None:
            return None
        return StatusMatch(
            prefix=bytes(m.group("prefix")),
            counter=bytes(m.group("counter")),
            description=bytes(m.group("description")),
            terminator=bytes(m.group("terminator")),
            end=m.end(),
        )

    def __repr__(self) -> str:
        return f"StatusPattern({self._template!r})"


def translate_template(template: str) -> bytes:
    """Translate a status template into the counter sub-pattern (bytes)."""
    parts: list[bytes] = []
    pos = 0
    for token in _TOKEN_RE.finditer(template):
        literal = template[pos:token.start()]
        if literal:
            parts.append(re.escape(literal.encode("utf-8")))
        sub = _PLACEHOLDERS.get(token.group(1))
        if sub is None:
            # ninja prints unknown placeholders verbatim
            sub = re.escape(token.group(0).encode("utf-8"))
        parts.append(sub)
        pos = token.end()
    tail = template[pos:]
    if tail:
        parts.append(re.escape(tail.encode("utf-8")))
    return b"".join(parts)


def compile_status_pattern(template: str | None = None) -> StatusPattern:
    """Compile *template* (or the default) into a ``StatusPattern``.

    The resulting matcher recognises, at the start of the buffer:
    an optional ``\\r``, the counter segment described by the template,
    a description, and a terminator that is either ``\\n`` or the
    erase-to-end-of-line sequence ``ESC [ K``.
    """
    if not template:
        template = DEFAULT_STATUS_TEMPLATE
    counter = translate_template(template)
    regex = re.compile(
        rb"(?P<prefix>\r?)"
        rb"(?P<counter>" + counter + rb")"
        rb"(?P<description>[^\n]*?)"
        rb"(?P<terminator>\n|" + re.escape(ERASE_TO_EOL) + rb")"
    )
    logger.debug("Compiled status template %r -> %r", template, regex.pattern)
    return StatusPattern(template, regex)
