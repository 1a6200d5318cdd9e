"""Unit tests for ConfigService."""

from __future__ import annotations

import pytest

from speedread_cli.models.config_models import AppConfig
from speedread_cli.services.config_service import ConfigService, parse_value


class TestParseValue:
    """Tests for parse_value()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("False", False), ("42", 42), ("1.5", 1.5), ("rsvp", "rsvp")],
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_value(raw) == expected


class TestLoadSave:
    """Tests for loading and saving config.json."""

    def test_first_load_writes_defaults(self, tmp_config: ConfigService) -> None:
        config = tmp_config.load_config()
        assert config == AppConfig()
        assert tmp_config.config_path.exists()

    def test_saved_values_survive_reload(self, tmp_config, tmp_path) -> None:
        tmp_config.config.reader.wpm = 480
        tmp_config.save_config()

        tmp_config._config = None
        assert tmp_config.load_config().reader.wpm == 480

    def test_corrupt_file_raises_runtime_error(self, tmp_config) -> None:
        tmp_config.config_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RuntimeError, match="Failed to load config"):
            tmp_config.load_config()

    def test_save_without_config_raises(self, tmp_config) -> None:
        with pytest.raises(RuntimeError):
            tmp_config.save_config()

    def test_history_path_in_data_dir(self, tmp_config, tmp_path) -> None:
        assert tmp_config.history_path.parent == tmp_path


class TestDottedKeys:
    """Tests for get/set/reset by dotted key."""

    def test_get(self, tmp_config) -> None:
        assert tmp_config.get("reader.wpm") == 300
        assert tmp_config.get("focus")["focus_minutes"] == 25

    def test_get_unknown_key(self, tmp_config) -> None:
        with pytest.raises(KeyError):
            tmp_config.get("reader.nope")

    def test_set_persists(self, tmp_config) -> None:
        assert tmp_config.set("focus.focus_minutes", 50) == 50
        assert '"focus_minutes": 50' in tmp_config.config_path.read_text()

    def test_set_clamps_reader_values(self, tmp_config) -> None:
        assert tmp_config.set("reader.wpm", 5000) == 1000

    def test_set_unknown_key(self, tmp_config) -> None:
        with pytest.raises(KeyError):
            tmp_config.set("reader.speed", 5)

    def test_set_invalid_value(self, tmp_config) -> None:
        with pytest.raises(ValueError):
            tmp_config.set("focus.focus_minutes", 0)
        assert tmp_config.get("focus.focus_minutes") == 25

    def test_reset_single_key(self, tmp_config) -> None:
        tmp_config.set("reader.font_size", 80)
        tmp_config.reset("reader.font_size")
        assert tmp_config.get("reader.font_size") == 48

    def test_reset_everything(self, tmp_config) -> None:
        tmp_config.set("ui.language", "ar")
        tmp_config.reset()
        assert tmp_config.config == AppConfig()

    def test_key_bindings(self, tmp_config) -> None:
        tmp_config.save_key_bindings({"reset": "z"})
        assert tmp_config.get("key_bindings.reset") == "z"

        tmp_config.reset("key_bindings.reset")
        assert tmp_config.config.key_bindings == {}
