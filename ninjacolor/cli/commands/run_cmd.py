"""``ninjacolor [OPTIONS] [NINJA ARGS...]`` — run ninja with colored output.

When color is off (``--color=never``, or ``auto`` with stdout not a
terminal) the process is replaced by ninja directly, so the output is
byte-identical to running ninja yourself.  Otherwise ninja runs under a
pseudo-terminal and its output is re-rendered.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

import typer
from rich.color import ColorSystem
from rich.console import Console
from rich.markup import escape

from ninjacolor.config import WrapperConfig
from ninjacolor.core.classifier import DiagnosticClassifier
from ninjacolor.core.coordinator import SessionCoordinator
from ninjacolor.core.mirror import MirrorOpenError, TeeMirror
from ninjacolor.core.preferences import load_preferences
from ninjacolor.core.reassembler import StreamReassembler
from ninjacolor.core.renderer import LineRenderer
from ninjacolor.core.status_pattern import compile_status_pattern
from ninjacolor.models.options import ColorMode, WrapperOptions
from ninjacolor.terminal import PseudoTerminalError, create_terminal

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

_COLOR_SYSTEMS: dict[str, ColorSystem] = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="ninjacolor: %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _detect_color_system() -> ColorSystem:
    name = Console(force_terminal=True).color_system or "standard"
    return _COLOR_SYSTEMS.get(name, ColorSystem.STANDARD)


def replace_process(argv: list[str]) -> None:
    """Replace the current process with *argv* (never returns)."""
    sys.stdout.flush()
    sys.stderr.flush()
    logger.debug("exec %s", argv)
    try:
        os.execvp(argv[0], argv)
    except OSError as exc:
        err_console.print(f"[bold red]ninjacolor:[/bold red] cannot run {escape(argv[0])}: {exc}")
        raise typer.Exit(code=127) from exc


def run_colored(
    argv: list[str],
    options: WrapperOptions,
    config: WrapperConfig,
    output: BinaryIO,
) -> int:
    """Run *argv* under a pseudo-terminal and render to *output*.

    Returns the child's exit code.

    Raises
    ------
    MirrorOpenError
        If ``--tee`` names a file that cannot be opened.
    PseudoTerminalError
        If the pty cannot be allocated or the child cannot be spawned.
    """
    prefs = load_preferences(config.resolved_preferences_path)
    for error in prefs.errors:
        err_console.print(f"[yellow]ninjacolor:[/yellow] {escape(str(error))}")

    styles = prefs.table.model_copy(update={"color_system": _detect_color_system()})
    classifier = DiagnosticClassifier() if options.diagnostics else None
    renderer = LineRenderer(styles, classifier)
    status_pattern = compile_status_pattern(config.status_format)

    mirror = TeeMirror(options.tee) if options.tee is not None else None
    try:
        reassembler = StreamReassembler(status_pattern, renderer, output, mirror)
        coordinator = SessionCoordinator(
            create_terminal(), reassembler, read_size=config.read_size
        )
        return coordinator.run(argv)
    finally:
        if mirror is not None:
            mirror.close()


def run_cmd(
    ctx: typer.Context,
    color: ColorMode = typer.Option(
        ColorMode.AUTO,
        "--color",
        case_sensitive=False,
        help="Colorize output: always, never or auto (default). Bare --color means always.",
    ),
    tee: Path = typer.Option(
        None,
        "--tee",
        help="Also write the output, stripped of escape sequences, to this file.",
    ),
    nogcc: bool = typer.Option(
        False,
        "--nogcc",
        help="Do not decompose compiler diagnostics; pass them through unchanged.",
    ),
    show_help: bool = typer.Option(
        False,
        "--help",
        help="Show this message (also -h), then ninja's own help.",
    ),
) -> None:
    """Run ninja with colorized output.

    All options not listed here, and all targets, are passed to ninja.
    """
    config = WrapperConfig()
    _configure_logging(config.log_level)

    options = WrapperOptions(
        color=color,
        tee=tee,
        diagnostics=not nogcc,
        passthrough=list(ctx.args),
    )
    argv = [config.ninja, *options.passthrough]

    if show_help:
        help_text = ctx.get_help()
        if help_text:
            typer.echo(help_text)
        replace_process([config.ninja, "--help"])

    if not options.wants_color(sys.stdout.isatty()):
        replace_process(argv)

    try:
        code = run_colored(argv, options, config, sys.stdout.buffer)
    except (MirrorOpenError, PseudoTerminalError) as exc:
        err_console.print(f"[bold red]ninjacolor:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    raise typer.Exit(code=code)
