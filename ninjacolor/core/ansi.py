"""ANSI escape sequence stripping for the plain-text mirror.

Removes:
- CSI sequences (``ESC [`` params intermediates final byte)
- OSC sequences (``ESC ]`` ... BEL or ``ESC \\``)
- Character set designation (``ESC ( X`` and friends)
- Two-byte escapes (``ESC`` + one character in ``@``-``_`` / ``=`` / ``>``)

A malformed or truncated sequence loses at most its introducer; the
remaining characters are kept as ordinary text.
"""

from __future__ import annotations

import re

_ANSI_ESCAPE_RE = re.compile(
    r"\x1b"
    r"(?:"
    r"\[[0-?]*[ -/]*[@-~]"  # CSI
    r"|\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC
    r"|[()*+][0-9A-Za-z]"  # charset designation
    r"|[@-Z\\-_=>]"  # Fe / keypad escapes
    r")?"
)


def strip_ansi(text: str) -> str:
    """Return *text* with every ANSI escape sequence removed."""
    return _ANSI_ESCAPE_RE.sub("", text)
