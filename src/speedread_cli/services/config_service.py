"""Configuration service for speedread-cli.

ConfigService is the single source of truth for configuration. It handles:

- Loading and saving config.json
- Dotted-key access (``reader.wpm``, ``focus.focus_minutes``)
- Persisting key bindings changed from inside the reader
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir

from speedread_cli.models.config_models import AppConfig

_APP_NAME = "speedread_cli"


def parse_value(value: str) -> Any:
    """Convert a CLI string to bool, int or float where it looks like one."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


class ConfigService:
    """Service for loading, saving and editing the application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def history_path(self) -> Path:
        return self.data_dir / "reading_history.db"

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """
        Get a value by dotted key.

        Raises:
            KeyError: If the key does not exist
        """
        node: Any = self.config.model_dump()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(key)
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> Any:
        """
        Set a value by dotted key and save.

        Numeric reader settings are clamped by the model, so the stored value
        may differ from the one given.

        Returns:
            The value actually stored

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        data = self.config.model_dump()
        parts = key.split(".")
        node = data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                raise KeyError(key)
            node = node[part]

        leaf = parts[-1]
        # key_bindings is an open mapping; everything else must already exist
        if leaf not in node and parts[0] != "key_bindings":
            raise KeyError(key)
        node[leaf] = value

        self._config = AppConfig.model_validate(data)
        self.save_config()
        return self.get(key)

    def reset(self, key: str | None = None) -> None:
        """Reset one dotted key, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        parts = key.split(".")
        if parts[0] == "key_bindings" and len(parts) == 2:
            bindings = dict(self.config.key_bindings)
            bindings.pop(parts[1], None)
            self.config.key_bindings = bindings
            self.save_config()
            return

        default: Any = AppConfig().model_dump()
        for part in parts:
            if not isinstance(default, dict) or part not in default:
                raise KeyError(key)
            default = default[part]
        self.set(key, default)

    def save_key_bindings(self, bindings: dict[str, str]) -> None:
        """Persist key bindings, keyed by action name."""
        self.config.key_bindings = dict(bindings)
        self.save_config()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
