"""Settings for rendering lessons.

The only configuration tidyground has is cosmetic:
how lessons are rendered. Settings can be provided
through command line options, or through environment variables
that act as defaults:

* ``TIDYGROUND_FORMAT`` - ``markdown`` or ``html``
* ``TIDYGROUND_THEME`` - one of :data:`tidyground.themes.THEMES`
* ``TIDYGROUND_ROWS`` - rows shown in each table preview
* ``TIDYGROUND_DIGITS`` - decimal digits of floating point values
"""

import os
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .themes import THEMES

ENV_PREFIX = "TIDYGROUND_"
ENV_FIELDS = {
    "FORMAT": "output_format",
    "THEME": "theme",
    "ROWS": "preview_rows",
    "DIGITS": "float_digits",
}


class RenderSettings(BaseModel):
    """How a lesson has to be rendered."""

    model_config = ConfigDict(frozen=True)

    output_format: Literal["markdown", "html"] = "markdown"
    theme: str = "default"
    preview_rows: int = Field(default=10, ge=1, le=1000)
    float_digits: int = Field(default=2, ge=0, le=10)

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        if value not in THEMES:
            raise ValueError(f"unknown theme {value!r}, available themes: {sorted(THEMES)}")
        return value


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RenderSettings:
    """Build the settings from the environment and explicit overrides.

    Overrides that are ``None`` are ignored, so that
    unset command line options fall back to the environment.

    :raises pydantic.ValidationError: when a value is not valid.
    """
    if environ is None:
        environ = os.environ

    values: dict[str, Any] = {}
    for env_name, field_name in ENV_FIELDS.items():
        env_value = environ.get(ENV_PREFIX + env_name)
        if env_value:
            values[field_name] = env_value

    for field_name, value in (overrides or {}).items():
        if value is not None:
            values[field_name] = value

    return RenderSettings(**values)
