"""Preference file loader — user color overrides for the style table.

File format
-----------
Line oriented text at ``~/.ninjacolor`` (``NINJACOLOR_PREFERENCES``)::

    # comment
    error   : bold red
    path    : underline
    code    :

Each data line is ``name : tok1 tok2 tok3`` with zero to three rich
style tokens.  Loading is best-effort: a missing file keeps the defaults,
and every malformed line is recorded and skipped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError
from rich.errors import StyleSyntaxError
from rich.style import Style

from ninjacolor.models.styles import (
    MAX_STYLE_TOKENS,
    Category,
    PreferenceEntry,
    StyleTable,
)

logger = logging.getLogger(__name__)

_ENTRY_RE = re.compile(r"\s*(?P<name>[A-Za-z_][\w-]*)\s*:(?P<value>.*)")


class PreferenceSyntaxError(ValueError):
    """Raised for a preference line that cannot be parsed."""


class PreferenceError(BaseModel):
    """One reported (non-fatal) preference parse error."""

    model_config = ConfigDict(frozen=True)

    path: Path
    line_number: int
    line: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line_number}: {self.reason}: {self.line!r}"


class PreferenceLoad(BaseModel):
    """Result of loading a preference source."""

    model_config = ConfigDict(frozen=True)

    table: StyleTable
    errors: list[PreferenceError] = []
    loaded: bool = False  # False when the source did not exist


def parse_preference_line(line: str) -> PreferenceEntry | None:
    """Parse one preference line.

    Returns ``None`` for blank and ``#`` comment lines.

    Raises
    ------
    PreferenceSyntaxError
        If the line is not ``name : tokens`` with at most three tokens,
        names an unknown category, or a token is not a valid style.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    m = _ENTRY_RE.fullmatch(line.rstrip("\r\n"))
    if m is None:
        raise PreferenceSyntaxError("expected 'name : style tokens'")

    name = m.group("name")
    tokens = tuple(m.group("value").split())
    if len(tokens) > MAX_STYLE_TOKENS:
        raise PreferenceSyntaxError(
            f"at most {MAX_STYLE_TOKENS} style tokens allowed, got {len(tokens)}"
        )

    try:
        entry = PreferenceEntry(category=name, tokens=tokens)
    except ValidationError as exc:
        raise PreferenceSyntaxError(f"unknown category {name!r}") from exc

    try:
        Style.parse(entry.style_spec)
    except StyleSyntaxError as exc:
        raise PreferenceSyntaxError(str(exc)) from exc

    return entry


def load_preferences(
    source: Path | str,
    base: StyleTable | None = None,
) -> PreferenceLoad:
    """Load overrides from *source* on top of *base* (defaults if omitted)."""
    base = base or StyleTable()
    path = Path(source).expanduser()

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.debug("No preference file at %s; using defaults", path)
        return PreferenceLoad(table=base)

    overrides: dict[Category, str] = {}
    errors: list[PreferenceError] = []

    for number, line in enumerate(text.splitlines(), start=1):
        try:
            entry = parse_preference_line(line)
        except PreferenceSyntaxError as exc:
            errors.append(
                PreferenceError(path=path, line_number=number, line=line, reason=str(exc))
            )
            continue
        if entry is not None:
            overrides[entry.category] = entry.style_spec

    logger.debug(
        "Loaded %d preference override(s) from %s (%d error(s))",
        len(overrides),
        path,
        len(errors),
    )
    return PreferenceLoad(
        table=base.with_overrides(overrides),
        errors=errors,
        loaded=True,
    )
