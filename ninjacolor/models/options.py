"""Command-line option models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ColorMode(str, Enum):
    """When to colorize ninja's output."""

    ALWAYS = "always"
    NEVER = "never"
    AUTO = "auto"


class WrapperOptions(BaseModel):
    """Options selected on the command line for one invocation."""

    model_config = ConfigDict(frozen=True)

    color: ColorMode = ColorMode.AUTO
    tee: Path | None = None
    diagnostics: bool = True  # False with --nogcc
    passthrough: list[str] = []

    def wants_color(self, stdout_is_tty: bool) -> bool:
        """Whether the pty/classification machinery should run at all."""
        if self.color is ColorMode.NEVER:
            return False
        if self.color is ColorMode.AUTO:
            return stdout_is_tty
        return True
