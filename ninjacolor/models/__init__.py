"""ninjacolor data models — Pydantic v2, frozen (immutable)."""

from ninjacolor.models.diagnostics import ClassifiedLine, LineShape, Severity
from ninjacolor.models.options import ColorMode, WrapperOptions
from ninjacolor.models.styles import (
    DEFAULT_STYLES,
    MAX_STYLE_TOKENS,
    Category,
    PreferenceEntry,
    StyleTable,
)

__all__ = [
    # styles
    "Category",
    "DEFAULT_STYLES",
    "MAX_STYLE_TOKENS",
    "PreferenceEntry",
    "StyleTable",
    # diagnostics
    "ClassifiedLine",
    "LineShape",
    "Severity",
    # options
    "ColorMode",
    "WrapperOptions",
]
