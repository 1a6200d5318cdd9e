"""Unit tests for the pydantic configuration models."""

from __future__ import annotations

from speedread_cli.models.config_models import AppConfig, FocusConfig


class TestAppConfig:
    """Tests for AppConfig and nested models."""

    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.reader.wpm == 300
        assert config.focus.focus_minutes == 25
        assert config.ui.language == "en"
        assert config.key_bindings == {}

    def test_json_round_trip_keeps_values(self) -> None:
        config = AppConfig(key_bindings={"reset": "z"})
        config.reader.font_size = 60
        loaded = AppConfig.model_validate_json(config.model_dump_json())
        assert loaded.reader.font_size == 60
        assert loaded.key_bindings == {"reset": "z"}

    def test_unknown_binding_names_are_dropped(self) -> None:
        config = AppConfig(key_bindings={"reset": "z", "fly": "q", "cycle_font": ""})
        assert config.key_bindings == {"reset": "z"}

    def test_out_of_range_reader_values_are_clamped_on_load(self) -> None:
        config = AppConfig.model_validate({"reader": {"wpm": 9000, "brightness": 1}})
        assert config.reader.wpm == 1000
        assert config.reader.brightness == 10

    def test_focus_config_to_pomodoro(self) -> None:
        pomodoro = FocusConfig(focus_minutes=50, custom_minutes=10).to_pomodoro()
        assert pomodoro.seconds_for("focus") == 3000
        assert pomodoro.seconds_for("custom") == 600
        assert pomodoro.seconds_for("short_break") == 300
