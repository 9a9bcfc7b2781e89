"""Shared test fixtures for ninjacolor."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ninjacolor.core.classifier import DiagnosticClassifier
from ninjacolor.core.mirror import TeeMirror
from ninjacolor.core.reassembler import StreamReassembler
from ninjacolor.core.renderer import LineRenderer
from ninjacolor.core.status_pattern import compile_status_pattern
from ninjacolor.models.styles import StyleTable


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def styles() -> StyleTable:
    """The default style table."""
    return StyleTable()


@pytest.fixture
def renderer(styles: StyleTable) -> LineRenderer:
    """A renderer with diagnostic classification enabled."""
    return LineRenderer(styles, DiagnosticClassifier())


@pytest.fixture
def make_reassembler(styles: StyleTable) -> Callable[..., tuple[StreamReassembler, io.BytesIO]]:
    """Factory fixture: build a reassembler writing into a BytesIO.

    Returns ``(reassembler, output)``.
    """

    def _factory(
        diagnostics: bool = True,
        mirror: TeeMirror | None = None,
        template: str | None = None,
        **overrides: Any,
    ) -> tuple[StreamReassembler, io.BytesIO]:
        output = io.BytesIO()
        renderer = LineRenderer(
            overrides.pop("styles", styles),
            DiagnosticClassifier() if diagnostics else None,
        )
        reassembler = StreamReassembler(
            compile_status_pattern(template),
            renderer,
            output,
            mirror,
        )
        return reassembler, output

    return _factory


# A representative ninja session as seen on a smart terminal.
NINJA_SESSION: bytes = (
    b"\r[1/4] Generating version.h\x1b[K"
    b"\r[2/4] Building CXX object src/x.cpp.o\x1b[K"
    b"\nFAILED: src/x.cpp.o \n"
    b"g++ -c src/x.cpp -o src/x.cpp.o\n"
    b"src/x.cpp: In function \xe2\x80\x98int main()\xe2\x80\x99:\n"
    b"src/x.cpp:12:5: error: \xe2\x80\x98foo\xe2\x80\x99 was not declared in this scope\n"
    b"src/x.cpp:3:1: note: suggested alternative: \xe2\x80\x98bar\xe2\x80\x99\n"
    b"\r[3/4] Linking CXX executable app\x1b[K"
    b"\n"
    b"ninja: build stopped: subcommand failed.\n"
)


@pytest.fixture
def ninja_session() -> bytes:
    """Raw bytes of a failing ninja run (status, diagnostics, failure)."""
    return NINJA_SESSION
