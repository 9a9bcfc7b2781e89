"""Diagnostic-line classifier — ordered structural rules for gcc/clang output.

Each rule pairs a full-line regex with a decomposer that turns the match
into a ``ClassifiedLine``.  Rules are evaluated in priority order and the
first match wins; a line no rule recognises is returned as ``None`` and
printed raw by the caller.

Priority
--------
1. label          ``src/x.cpp: In function ‘int main()’:``
2. error          ``src/x.cpp:12:5: error: ‘foo’ was not declared``
3. warning/note   ``src/x.cpp:12:5: warning: unused variable ‘y’``
4. generic        ``src/x.cpp:12: some message``
5. include ctx    ``In file included from a.h:3,`` / ``                 from b.cpp:1:``
6. instantiation  ``foo.h: instantiated from here``
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import NamedTuple

from ninjacolor.models.diagnostics import ClassifiedLine, LineShape, Severity

# <path:> is anything up to the first colon that does not start with
# whitespace; <location> is ``line: `` or ``line:col: ``.
_PATH = r"(?P<path>[^\s:][^:]*:)"
_LOCATION = r"(?P<location>\d+(?::\d+)?: )"


class Rule(NamedTuple):
    """One classification rule: a pattern and its decomposer."""

    name: str
    pattern: re.Pattern[str]
    decompose: Callable[[re.Match[str]], ClassifiedLine]


def _label(m: re.Match[str]) -> ClassifiedLine:
    return ClassifiedLine(
        shape=LineShape.LABEL,
        prefix=m.group("prefix"),
        path=m.group("segment"),
        suffix=":",
    )


def _diagnostic(severity: Severity) -> Callable[[re.Match[str]], ClassifiedLine]:
    def decompose(m: re.Match[str]) -> ClassifiedLine:
        return ClassifiedLine(
            shape=LineShape.DIAGNOSTIC,
            path=m.group("path"),
            location=m.group("location"),
            severity=severity,
            severity_label=m.group("severity") if severity is not Severity.NONE else "",
            message=m.group("message"),
        )

    return decompose


def _include_context(m: re.Match[str]) -> ClassifiedLine:
    return ClassifiedLine(
        shape=LineShape.INCLUDE_CONTEXT,
        prefix=m.group("prefix"),
        path=m.group("path"),
        location=m.group("line"),
        message=m.group("rest"),
    )


def _instantiation(m: re.Match[str]) -> ClassifiedLine:
    return ClassifiedLine(
        shape=LineShape.INSTANTIATION,
        path=m.group("label"),
        message=m.group("rest"),
    )


RULES: tuple[Rule, ...] = (
    Rule(
        "label",
        re.compile(r"(?P<prefix>.*: )(?P<segment>.*):"),
        _label,
    ),
    Rule(
        "error",
        re.compile(_PATH + _LOCATION + r"(?P<severity>(?:fatal )?error:)(?P<message>.*)"),
        _diagnostic(Severity.ERROR),
    ),
    Rule(
        "warning",
        re.compile(_PATH + _LOCATION + r"(?P<severity>warning:|note:)(?P<message>.*)"),
        _diagnostic(Severity.WARNING),
    ),
    Rule(
        "generic",
        re.compile(_PATH + _LOCATION + r"(?P<message>.*)"),
        _diagnostic(Severity.NONE),
    ),
    Rule(
        "include_context",
        re.compile(
            r"(?P<prefix>In file included from | {16,}from )"
            r"(?P<path>[^:]+):(?P<line>\d+)(?P<rest>[,:].*)"
        ),
        _include_context,
    ),
    Rule(
        "instantiation",
        re.compile(r"(?P<label>.*?:)(?P<rest> +instantiated from .*)"),
        _instantiation,
    ),
)


class DiagnosticClassifier:
    """Classifies single output lines against an ordered rule list.

    Parameters
    ----------
    rules:
        Rules in priority order.  Defaults to ``RULES``.
    """

    def __init__(self, rules: tuple[Rule, ...] = RULES) -> None:
        self._rules = rules

    def classify(self, line: str) -> ClassifiedLine | None:
        """Return the first rule's decomposition of *line*, or ``None``."""
        for rule in self._rules:
            m = rule.pattern.fullmatch(line)
            if m is not None:
                return rule.decompose(m)
        return None
