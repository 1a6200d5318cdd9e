"""Reader display settings and their keyboard adjusters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from pydantic import BaseModel, Field, field_validator

from .playback import DEFAULT_WPM, clamp_wpm


class NamedOption(NamedTuple):
    name: str
    value: str


FONTS: tuple[NamedOption, ...] = (
    NamedOption("Amiri", "Amiri"),
    NamedOption("Noto Naskh", "Noto Naskh Arabic"),
    NamedOption("Scheherazade", "Scheherazade New"),
    NamedOption("Cairo", "Cairo"),
    NamedOption("Tajawal", "Tajawal"),
    NamedOption("Mono", "monospace"),
)

TEXT_COLORS: tuple[NamedOption, ...] = (
    NamedOption("White", "#e2e8f0"),
    NamedOption("Sepia", "#f5deb3"),
    NamedOption("Mint", "#86efac"),
    NamedOption("Sky", "#7dd3fc"),
    NamedOption("Rose", "#fda4af"),
    NamedOption("Amber", "#fcd34d"),
)

READING_MODES: tuple[str, ...] = (
    "typewriter",
    "rsvp",
    "highlight",
    "spotlight",
    "magnify",
    "scroller",
    "karaoke",
    "bounce",
    "pulse",
    "blur",
    "wavy",
    "glitch",
    "gradient",
    "outline",
    "neon",
    "mirror",
    "spread",
    "flash",
    "dim",
    "boxed",
    "underline",
    "marker",
    "thick",
    "shake",
    "jelly",
    "swing",
    "slide_down",
)

FONT_SIZE_RANGE = (12, 150)
BRIGHTNESS_RANGE = (10, 150)
GLOW_RANGE = (0, 50)

RATE_STEP = 20
FONT_SIZE_STEP = 2
BRIGHTNESS_STEP = 5
GLOW_STEP = 5


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, int(value)))


def mode_label(mode: str) -> str:
    """Human-readable name of a reading mode."""
    return mode.replace("_", " ").title()


class ReaderSettings(BaseModel):
    """Display settings. Numeric fields are clamped, never rejected."""

    model_config = {"validate_assignment": True}

    wpm: int = Field(default=DEFAULT_WPM)
    font_size: int = Field(default=48)
    font_family: str = Field(default=FONTS[0].value)
    is_bold: bool = Field(default=False)
    reading_mode: str = Field(default="typewriter")
    brightness: int = Field(default=100)
    text_color: str = Field(default=TEXT_COLORS[0].value)
    highlight_color: str = Field(default="#38bdf8")
    background_color: str = Field(default="#0f172a")
    glow_intensity: int = Field(default=0)

    @field_validator("wpm")
    @classmethod
    def clamp_rate(cls, v: int) -> int:
        return clamp_wpm(v)

    @field_validator("font_size")
    @classmethod
    def clamp_font_size(cls, v: int) -> int:
        return _clamp(v, FONT_SIZE_RANGE)

    @field_validator("brightness")
    @classmethod
    def clamp_brightness(cls, v: int) -> int:
        return _clamp(v, BRIGHTNESS_RANGE)

    @field_validator("glow_intensity")
    @classmethod
    def clamp_glow(cls, v: int) -> int:
        return _clamp(v, GLOW_RANGE)

    @field_validator("reading_mode")
    @classmethod
    def known_mode(cls, v: str) -> str:
        return v if v in READING_MODES else "typewriter"


def _next_option(options: Sequence[NamedOption], current: str) -> NamedOption:
    values = [option.value for option in options]
    index = values.index(current) if current in values else -1
    return options[(index + 1) % len(options)]


class SettingsController:
    """Keyboard adjusters over ReaderSettings. Each returns feedback text."""

    def __init__(self, settings: ReaderSettings):
        self.settings = settings

    def adjust_font_size(self, steps: int) -> str:
        self.settings.font_size = self.settings.font_size + steps * FONT_SIZE_STEP
        return f"{self.settings.font_size}"

    def adjust_brightness(self, steps: int) -> str:
        self.settings.brightness = self.settings.brightness + steps * BRIGHTNESS_STEP
        return f"{self.settings.brightness}%"

    def adjust_glow(self, steps: int) -> str:
        self.settings.glow_intensity = self.settings.glow_intensity + steps * GLOW_STEP
        return f"{self.settings.glow_intensity}"

    def toggle_bold(self) -> str:
        self.settings.is_bold = not self.settings.is_bold
        return "Bold" if self.settings.is_bold else "Normal"

    def cycle_font(self) -> str:
        font = _next_option(FONTS, self.settings.font_family)
        self.settings.font_family = font.value
        return font.name

    def cycle_color(self) -> str:
        color = _next_option(TEXT_COLORS, self.settings.text_color)
        self.settings.text_color = color.value
        return color.name

    def cycle_mode(self) -> str:
        modes = list(READING_MODES)
        index = modes.index(self.settings.reading_mode)
        self.settings.reading_mode = modes[(index + 1) % len(modes)]
        return mode_label(self.settings.reading_mode)
