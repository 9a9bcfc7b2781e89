"""Style table models — semantic output categories mapped to rich styles.

The table is built once at startup (defaults plus preference overrides)
and handed by reference to every renderer.  It is frozen; overrides
produce a new table.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.color import ColorSystem
from rich.style import Style


class Category(str, Enum):
    """Semantic categories that output segments are rendered as."""

    STATUS = "status"
    GENERATING = "generating"
    BUILDING = "building"
    LINKING = "linking"
    FAILED = "failed"
    PATH = "path"
    LOCATION = "location"
    WARNING = "warning"
    ERROR = "error"
    CODE = "code"


# Maximum number of style tokens on one preference line.
MAX_STYLE_TOKENS = 3

DEFAULT_STYLES: dict[Category, str] = {
    Category.STATUS: "green",
    Category.GENERATING: "magenta",
    Category.BUILDING: "bold",
    Category.LINKING: "bold cyan",
    Category.FAILED: "bold red",
    Category.PATH: "bold",
    Category.LOCATION: "bold",
    Category.WARNING: "bold magenta",
    Category.ERROR: "bold red",
    Category.CODE: "bold",
}


class PreferenceEntry(BaseModel):
    """A parsed ``name : tok1 tok2 tok3`` preference line."""

    model_config = ConfigDict(frozen=True)

    category: Category
    tokens: tuple[str, ...] = ()

    @field_validator("tokens")
    @classmethod
    def _at_most_three(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(value) > MAX_STYLE_TOKENS:
            raise ValueError(
                f"at most {MAX_STYLE_TOKENS} style tokens allowed, got {len(value)}"
            )
        return value

    @property
    def style_spec(self) -> str:
        return " ".join(self.tokens)


class StyleTable(BaseModel):
    """Immutable mapping of ``Category`` to a rich style definition.

    Parameters
    ----------
    styles:
        Style definitions keyed by category.  An empty string means
        "no style".  Missing categories render unstyled.
    color_system:
        The rich color system used when rendering SGR sequences.

    Examples
    --------
    >>> table = StyleTable()
    >>> table.render(Category.ERROR, "error:")
    '\\x1b[1;31merror:\\x1b[0m'
    >>> table.render("no-such-category", "text")
    'text'
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    styles: dict[Category, str] = Field(
        default_factory=lambda: dict(DEFAULT_STYLES)
    )
    color_system: ColorSystem = ColorSystem.STANDARD

    def resolve(self, category: Category | str) -> Style:
        """Return the rich ``Style`` for *category*, or the null style."""
        try:
            key = Category(category)
        except ValueError:
            return Style.null()
        spec = self.styles.get(key, "")
        if not spec:
            return Style.null()
        return Style.parse(spec)

    def render(self, category: Category | str, text: str) -> str:
        """Wrap *text* in the SGR sequence for *category* plus a reset."""
        return self.resolve(category).render(text, color_system=self.color_system)

    def with_overrides(self, overrides: dict[Category, str]) -> StyleTable:
        """Return a new table with *overrides* applied on top of this one."""
        merged = dict(self.styles)
        merged.update(overrides)
        return StyleTable(styles=merged, color_system=self.color_system)
