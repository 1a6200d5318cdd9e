"""Configuration models for speedread-cli.

The whole configuration is one pydantic model persisted as JSON by
``ConfigService``. Reader settings clamp out-of-range values instead of
rejecting them, so a hand-edited config file never fails on a bad number.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from speedread_cli.models.focus.pomodoro import PomodoroConfig
from speedread_cli.models.reader.dispatcher import parse_action
from speedread_cli.models.reader.settings import ReaderSettings


class FocusConfig(BaseModel):
    """Pomodoro phase durations in minutes."""

    focus_minutes: int = Field(default=25, ge=1)
    short_break_minutes: int = Field(default=5, ge=1)
    long_break_minutes: int = Field(default=15, ge=1)
    custom_minutes: int = Field(default=30, ge=1)

    def to_pomodoro(self) -> PomodoroConfig:
        return PomodoroConfig(
            focus_duration=self.focus_minutes,
            short_break=self.short_break_minutes,
            long_break=self.long_break_minutes,
            custom_duration=self.custom_minutes,
        )


class UIConfig(BaseModel):
    """Terminal UI configuration."""

    language: Literal["ar", "en"] = Field(default="en")
    refresh_per_second: int = Field(default=20, ge=1, le=60)
    context_words: int = Field(
        default=60, ge=1, description="Words drawn around the cursor"
    )
    feedback_seconds: float = Field(default=1.5, gt=0)


class AppConfig(BaseModel):
    """Main speedread-cli configuration."""

    reader: ReaderSettings = Field(default_factory=ReaderSettings)
    focus: FocusConfig = Field(default_factory=FocusConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    key_bindings: dict[str, str] = Field(
        default_factory=dict, description="Overrides keyed by action name"
    )

    @field_validator("key_bindings")
    @classmethod
    def drop_unknown_actions(cls, v: dict[str, str]) -> dict[str, str]:
        return {name: key for name, key in v.items() if parse_action(name) and key}
