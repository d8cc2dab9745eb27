"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (TOCSYNC__TRACKER__ROOT_MARGIN="-64px 0px -75% 0px")
  2. tocsync.yaml           (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first tocsync.yaml found, or None."""
    candidates = [
        Path("tocsync.yaml"),
        Path(platformdirs.user_config_dir("tocsync")) / "tocsync.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class TrackerSettings(BaseModel):
    # Band near the top of the viewport: a heading becomes active once it
    # enters the region between 80px from the top and 80% from the bottom.
    root_margin: str = "-80px 0px -80% 0px"
    threshold: float = Field(default=0.0, ge=0.0, le=1.0)
    scroll_behavior: Literal["smooth", "instant", "auto"] = "smooth"
    scroll_block: Literal["start", "center", "end", "nearest"] = "start"


class RenderSettings(BaseModel):
    min_depth: int = Field(default=2, ge=1, le=6)
    max_depth: int = Field(default=4, ge=1, le=6)

    nav_label: str = "Table of contents"
    open_label: str = "Open table of contents"
    close_label: str = "Close table of contents"
    collapsed_text: str = "Table of contents"
    expanded_text: str = "Hide"

    wrapper_class: str = "toc-wrapper"
    toggle_class: str = "toc-toggle"
    content_class: str = "toc-content"
    content_open_class: str = "toc-content--open"
    chevron_class: str = "toc-chevron"
    chevron_open_class: str = "toc-chevron--open"
    list_class: str = "toc-list"
    item_class: str = "toc-item"
    link_class: str = "toc-link"
    active_link_class: str = "toc-link--active"

    @model_validator(mode="after")
    def validate_depth_range(self) -> RenderSettings:
        if self.min_depth > self.max_depth:
            raise ValueError(
                f"min_depth ({self.min_depth}) must not exceed max_depth ({self.max_depth})"
            )
        return self


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: TOCSYNC__RENDER__MAX_DEPTH=3
        env_prefix="TOCSYNC__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    tracker: TrackerSettings = TrackerSettings()
    render: RenderSettings = RenderSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
