"""Unit tests for configuration defaults and sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from tocsync.config import LoggingSettings, RenderSettings, Settings, TrackerSettings

if TYPE_CHECKING:
    from pathlib import Path


class TestDefaults:
    def test_tracker_band_near_top(self) -> None:
        settings = TrackerSettings()
        assert settings.root_margin == "-80px 0px -80% 0px"
        assert settings.threshold == 0.0
        assert settings.scroll_behavior == "smooth"
        assert settings.scroll_block == "start"

    def test_render_defaults(self) -> None:
        settings = RenderSettings()
        assert (settings.min_depth, settings.max_depth) == (2, 4)
        assert settings.nav_label == "Table of contents"
        assert settings.active_link_class == "toc-link--active"

    def test_logging_defaults(self) -> None:
        settings = LoggingSettings()
        assert settings.level == "WARNING"
        assert settings.format == "text"


class TestValidation:
    def test_min_depth_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_depth"):
            RenderSettings(min_depth=5, max_depth=3)

    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            TrackerSettings(threshold=1.5)

    def test_unknown_scroll_block(self) -> None:
        with pytest.raises(ValidationError):
            TrackerSettings(scroll_block="top")


class TestSources:
    def test_env_nested_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOCSYNC__TRACKER__ROOT_MARGIN", "-64px 0px -70% 0px")
        monkeypatch.setenv("TOCSYNC__RENDER__MAX_DEPTH", "3")
        settings = Settings()
        assert settings.tracker.root_margin == "-64px 0px -70% 0px"
        assert settings.render.max_depth == 3

    def test_init_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOCSYNC__LOGGING__LEVEL", "DEBUG")
        settings = Settings(logging={"level": "ERROR"})
        assert settings.logging.level == "ERROR"

    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "tocsync.yaml"
        config.write_text(
            "render:\n  nav_label: Contents\ntracker:\n  scroll_behavior: instant\n",
            encoding="utf-8",
        )

        class FileSettings(Settings):
            model_config = SettingsConfigDict(yaml_file=str(config))

        settings = FileSettings()
        assert settings.render.nav_label == "Contents"
        assert settings.tracker.scroll_behavior == "instant"
        assert settings.render.max_depth == 4
