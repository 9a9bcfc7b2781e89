"""ninjacolor CLI — Typer-based command-line interface.

Provides the ``ninjacolor`` command: a drop-in replacement for ``ninja``
that colorizes its output.  Wrapper options are consumed; every other
option and positional argument is passed to ninja verbatim.

Wrapper messages use Rich on stderr.
"""
