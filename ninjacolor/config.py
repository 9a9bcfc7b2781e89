"""Runtime configuration — environment-driven via pydantic-settings.

All settings can be overridden with ``NINJACOLOR_*`` environment
variables.  The status template is read from ninja's own
``NINJA_STATUS`` variable so that the wrapper always parses exactly what
ninja prints.

Examples
--------
::

    export NINJACOLOR_NINJA=/opt/ninja/bin/ninja
    export NINJACOLOR_PREFERENCES=~/.config/ninjacolor
    export NINJACOLOR_LOG_LEVEL=DEBUG
    export NINJA_STATUS="[%f/%t %e] "
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ninjacolor.core.status_pattern import DEFAULT_STATUS_TEMPLATE


class WrapperConfig(BaseSettings):
    """Configuration for one wrapper invocation."""

    model_config = SettingsConfigDict(
        env_prefix="NINJACOLOR_",
        extra="ignore",
        populate_by_name=True,
    )

    # The wrapped build tool
    ninja: str = "ninja"

    # User color preferences (flat ``name : tokens`` file)
    preferences_path: Path = Field(
        default=Path("~/.ninjacolor"),
        validation_alias=AliasChoices("NINJACOLOR_PREFERENCES", "preferences_path"),
    )

    # ninja's progress-line template
    status_format: str = Field(
        default=DEFAULT_STATUS_TEMPLATE,
        validation_alias=AliasChoices("NINJA_STATUS", "status_format"),
    )

    # Observability
    log_level: str = "WARNING"

    # I/O
    read_size: int = 4096

    @property
    def resolved_preferences_path(self) -> Path:
        return self.preferences_path.expanduser()
