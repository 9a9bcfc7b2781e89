"""ninjacolor: colorized, pty-transparent wrapper around the ninja build tool.

Runs ninja under a pseudo-terminal so it keeps its smart-terminal
behaviour, then re-renders the stream:
  - status lines (``[3/10] Building foo.o``) styled and still overwritten
    in place
  - gcc/clang diagnostics decomposed into path, location, severity and
    message, with quoted code highlighted
  - ``FAILED:`` and ``ninja: build stopped:`` lines in the failure style
  - optional plain-text mirror (``--tee``)
  - interrupts forwarded to ninja, ninja's exit status preserved
"""

__version__ = "0.1.0"
__description__ = "Colorized, pty-transparent wrapper around the ninja build tool"

from ninjacolor.core.reassembler import StreamReassembler
from ninjacolor.models.styles import StyleTable
from ninjacolor.cli.app import app as cli

__all__ = ["StreamReassembler", "StyleTable", "cli", "__version__"]
