"""Per-word styling policy for each reading mode.

``style_for`` is a pure lookup: given the reading mode, the cursor and a
token index it returns how that token should look, or None when the token
is not shown at all. Renderers translate a WordStyle into their own terms.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Literal

ColorRole = Literal["highlight", "text", "muted", "faint", "transparent"]


@dataclass(frozen=True)
class WordStyle:
    """How a single token is drawn."""

    role: ColorRole = "text"
    opacity: float = 1.0
    scale: float = 1.0
    blur: float = 0.0
    effects: frozenset[str] = field(default_factory=frozenset)
    glow: bool = False


@dataclass(frozen=True)
class ModePolicy:
    """Styles for the current token and for tokens before/after it.

    None means the token is hidden.
    """

    current: WordStyle
    past: WordStyle | None
    future: WordStyle | None


def _style(role: ColorRole = "text", *effects: str, **kwargs) -> WordStyle:
    return WordStyle(role=role, effects=frozenset(effects), **kwargs)


_TEXT = _style("text")

# Modes where already-read words keep the glow, not only the current word.
GLOW_TRAIL_MODES = frozenset({"typewriter", "karaoke", "wavy", "glitch"})


def _reveal(current: WordStyle, past: WordStyle = _TEXT) -> ModePolicy:
    """Policy for modes that only show words up to the cursor."""
    return ModePolicy(current=current, past=past, future=None)


POLICIES: dict[str, ModePolicy] = {
    "typewriter": _reveal(
        _style("highlight", "cursor", scale=1.05), _style("text", opacity=0.9)
    ),
    "rsvp": ModePolicy(current=_style("highlight", "bold"), past=None, future=None),
    "highlight": ModePolicy(
        current=_style("highlight", scale=1.1),
        past=_style("muted", opacity=0.4, blur=0.5),
        future=_style("muted", opacity=0.4, blur=0.5),
    ),
    "spotlight": ModePolicy(
        current=_style("highlight", scale=1.1),
        past=_style("faint", opacity=0.2, blur=4.0, scale=0.95),
        future=_style("faint", opacity=0.2, blur=4.0, scale=0.95),
    ),
    "magnify": ModePolicy(
        current=_style("highlight", scale=1.7),
        past=_style("muted", opacity=0.8),
        future=_style("muted", opacity=0.8),
    ),
    "scroller": ModePolicy(
        current=_style("highlight", "bold", scale=1.25),
        past=_style("faint", opacity=0.4, scale=0.9),
        future=_style("faint", opacity=0.4, scale=0.9),
    ),
    "karaoke": ModePolicy(
        current=_style("highlight", scale=1.1),
        past=_TEXT,
        future=_style("faint", opacity=0.5),
    ),
    "bounce": _reveal(_style("highlight", "raised")),
    "pulse": _reveal(
        _style("highlight", "blink", scale=1.1), _style("text", opacity=0.8)
    ),
    "blur": ModePolicy(
        current=_style("highlight", scale=1.1),
        past=_style("text", opacity=0.4, blur=4.0),
        future=_style("text", opacity=0.4, blur=4.0),
    ),
    "wavy": _reveal(_style("highlight", "raised")),
    "glitch": _reveal(_style("highlight", "skew", scale=1.1, opacity=0.9)),
    "gradient": _reveal(_style("highlight", "gradient")),
    "outline": _reveal(_style("transparent", "outline")),
    "neon": _reveal(_style("highlight", "glow-ring")),
    "mirror": _reveal(_style("highlight", "reflect")),
    "spread": _reveal(_style("highlight", "spaced", scale=1.1)),
    "flash": _reveal(_style("highlight", "blink")),
    "dim": _reveal(_style("highlight", scale=1.05), _style("text", opacity=0.05)),
    "boxed": _reveal(_style("highlight", "boxed")),
    "underline": _reveal(_style("highlight", "underline")),
    "marker": _reveal(_style("text", "marker")),
    "thick": _reveal(_style("highlight", "heavy")),
    "shake": _reveal(_style("highlight", "blink")),
}

# Animated variants without a distinct static look draw like typewriter.
for _mode in ("jelly", "swing", "slide_down"):
    POLICIES[_mode] = POLICIES["typewriter"]

DEFAULT_MODE = "typewriter"


def policy_for(mode: str) -> ModePolicy:
    """Policy for a mode, falling back to typewriter for unknown modes."""
    return POLICIES.get(mode, POLICIES[DEFAULT_MODE])


def style_for(mode: str, cursor: int, index: int) -> WordStyle | None:
    """
    Style of token ``index`` when the cursor is at ``cursor``.

    Args:
        mode: Reading mode name
        cursor: Current cursor (-1 when playback has not started)
        index: Token index being drawn

    Returns:
        The token's WordStyle, or None if it is hidden
    """
    policy = policy_for(mode)
    if index == cursor:
        style = policy.current
    elif index < cursor:
        style = policy.past
    else:
        style = policy.future

    if style is None:
        return None

    glow = index == cursor or mode in GLOW_TRAIL_MODES
    if glow != style.glow:
        style = replace(style, glow=glow)
    return style


def styled_words(
    mode: str, cursor: int, words: Sequence[str], start: int = 0
) -> list[tuple[int, str, WordStyle]]:
    """
    Visible tokens with their styles, in reading order.

    ``words`` may be a window of the text; ``start`` is the index of its
    first token.
    """
    styled = []
    for index, word in enumerate(words, start):
        style = style_for(mode, cursor, index)
        if style is not None:
            styled.append((index, word, style))
    return styled
