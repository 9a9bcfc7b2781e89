"""Classified-line models — the tagged decomposition of one output line."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Severity carried by a classified diagnostic line."""

    NONE = "none"
    ERROR = "error"
    WARNING = "warning"  # also used for ``note:``
    FAILED = "failed"  # reserved; ninja failure lines are matched by the renderer


class LineShape(str, Enum):
    """Which structural pattern recognised the line."""

    LABEL = "label"
    DIAGNOSTIC = "diagnostic"
    INCLUDE_CONTEXT = "include_context"
    INSTANTIATION = "instantiation"


class ClassifiedLine(BaseModel):
    """Transient decomposition of one compiler/linker output line.

    Segment meaning depends on ``shape``:

    - ``LABEL``: ``prefix`` is the text up to and including the last
      ``": "``, ``path`` the trailing segment and ``suffix`` the closing
      ``:``.
    - ``DIAGNOSTIC``: ``path`` ends in ``:``, ``location`` is
      ``line[:col]: ``, ``severity_label`` holds the literal severity
      text (``error:``, ``warning:``) and ``message`` the rest.
    - ``INCLUDE_CONTEXT``: ``prefix`` is ``In file included from `` or
      the indented ``from ``, ``path`` the file, ``location`` the line
      number and ``message`` the unstyled rest.
    - ``INSTANTIATION``: ``path`` is the label, ``message`` the rest.
    """

    model_config = ConfigDict(frozen=True)

    shape: LineShape
    prefix: str = ""
    path: str = ""
    location: str = ""
    severity: Severity = Severity.NONE
    severity_label: str = ""
    message: str = ""
    suffix: str = ""
