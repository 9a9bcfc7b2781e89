"""Main Typer application.

Entry point: ``ninjacolor`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import sys

import click
import typer
from typer.core import TyperCommand

from ninjacolor.cli.commands.run_cmd import run_cmd


class PassthroughCommand(TyperCommand):
    """Command that hands ``--`` and everything after it to ninja.

    click drops the separator itself while parsing, so the tail is split
    off first and appended to ``ctx.args`` unchanged.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if "--" in args:
            split = args.index("--")
            args, tail = args[:split], args[split:]
        else:
            tail = []
        rest = super().parse_args(ctx, args)
        ctx.args = [*rest, *tail]
        return ctx.args


app = typer.Typer(
    name="ninjacolor",
    help="Run ninja with colorized status lines and compiler diagnostics.",
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(
    name="run",
    cls=PassthroughCommand,
    add_help_option=False,
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": True,
    },
)(run_cmd)


def normalize_argv(argv: list[str]) -> list[str]:
    """Rewrite the spellings click cannot express directly.

    - bare ``--color`` means ``--color=always``
    - ``-h`` is an alias of ``--help``

    Arguments after ``--`` are left alone.
    """
    normalized: list[str] = []
    for index, arg in enumerate(argv):
        if arg == "--":
            normalized.extend(argv[index:])
            break
        if arg == "--color":
            normalized.append("--color=always")
        elif arg == "-h":
            normalized.append("--help")
        else:
            normalized.append(arg)
    return normalized


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    app(args=normalize_argv(args), prog_name="ninjacolor")


if __name__ == "__main__":
    main()
