"""Render classified units back to styled terminal text.

All rendering goes through a ``StyleTable``; the renderer holds no other
state.  Rendered lines include their trailing newline, status units
their original terminator.
"""

from __future__ import annotations

import re

from ninjacolor.core.ansi import strip_ansi
from ninjacolor.core.classifier import DiagnosticClassifier
from ninjacolor.models.diagnostics import ClassifiedLine, LineShape, Severity
from ninjacolor.models.styles import Category, StyleTable

FAILURE_PREFIXES: tuple[str, ...] = ("FAILED: ", "ninja: build stopped: ")

# ‘typographic’, `backtick' and 'straight' quoted spans
_QUOTED_RE = re.compile(
    r"(?P<open>‘)(?P<a>[^’]*)(?P<c1>’)"
    r"|(?P<open2>`)(?P<b>[^`']*)(?P<c2>')"
    r"|(?P<open3>')(?P<c>[^']*)(?P<c3>')"
)

_SEVERITY_CATEGORY: dict[Severity, Category] = {
    Severity.ERROR: Category.ERROR,
    Severity.WARNING: Category.WARNING,
    Severity.FAILED: Category.FAILED,
}


def highlight_code(message: str, styles: StyleTable) -> str:
    """Wrap the inside of every quoted span of *message* in the code style.

    The quote characters themselves are left as literal text.

    >>> highlight_code("‘foo’ was not declared", StyleTable(styles={}))
    '‘foo’ was not declared'
    """

    def _wrap(m: re.Match[str]) -> str:
        if m.group("open") is not None:
            opening, inner, closing = m.group("open", "a", "c1")
        elif m.group("open2") is not None:
            opening, inner, closing = m.group("open2", "b", "c2")
        else:
            opening, inner, closing = m.group("open3", "c", "c3")
        return opening + styles.render(Category.CODE, inner) + closing

    return _QUOTED_RE.sub(_wrap, message)


def is_failure_line(line: str) -> bool:
    """``FAILED: ...`` and ``ninja: build stopped: ...`` lines."""
    return strip_ansi(line).startswith(FAILURE_PREFIXES)


def status_category(description: str) -> Category:
    """Pick the style category for a status description."""
    if description.startswith("Generating"):
        return Category.GENERATING
    if description.startswith("Linking"):
        return Category.LINKING
    # "Building ..." and everything else
    return Category.BUILDING


class LineRenderer:
    """Renders status units and classified lines with a ``StyleTable``.

    Parameters
    ----------
    styles:
        The style table built at startup.
    classifier:
        Diagnostic classifier, or ``None`` to disable diagnostic
        decomposition (``--nogcc``).
    """

    def __init__(
        self,
        styles: StyleTable,
        classifier: DiagnosticClassifier | None = None,
    ) -> None:
        self.styles = styles
        self.classifier = classifier

    # ------------------------------------------------------------------
    # Status units
    # ------------------------------------------------------------------

    def render_status(
        self, prefix: str, counter: str, description: str, terminator: str
    ) -> str:
        category = status_category(description)
        return (
            prefix
            + self.styles.render(Category.STATUS, counter)
            + self.styles.render(category, description)
            + terminator
        )

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def render_line(self, line: str) -> str:
        """Render one complete line (without its newline) plus ``\\n``."""
        if is_failure_line(line):
            return self.render_failed(line)
        if self.classifier is not None:
            classified = self.classifier.classify(line)
            if classified is not None:
                return self.render_classified(classified)
        return line + "\n"

    def render_failed(self, line: str) -> str:
        return self.styles.render(Category.FAILED, strip_ansi(line)) + "\n"

    def render_classified(self, cl: ClassifiedLine) -> str:
        render = self.styles.render
        if cl.shape is LineShape.LABEL:
            text = cl.prefix + render(Category.PATH, cl.path) + cl.suffix
        elif cl.shape is LineShape.DIAGNOSTIC:
            text = render(Category.PATH, cl.path) + render(Category.LOCATION, cl.location)
            category = _SEVERITY_CATEGORY.get(cl.severity)
            if category is not None:
                text += render(category, cl.severity_label)
            text += highlight_code(cl.message, self.styles)
        elif cl.shape is LineShape.INCLUDE_CONTEXT:
            text = (
                cl.prefix
                + render(Category.PATH, cl.path + ":")
                + render(Category.LOCATION, cl.location)
                + cl.message
            )
        else:
            text = render(Category.PATH, cl.path) + cl.message
        return text + "\n"
