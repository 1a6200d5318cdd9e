"""Keyboard command dispatch for the reader.

Each physical key press resolves to at most one Action through a single
lookup in the binding map, and each Action maps to exactly one handler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Closed set of reader actions.

    Declaration order is also the precedence order when two actions share
    the same key.
    """

    TOGGLE_PLAYBACK = "toggle_playback"
    RESET = "reset"
    SEEK_PREVIOUS = "seek_previous"
    SEEK_NEXT = "seek_next"
    INCREASE_FONT_SIZE = "increase_font_size"
    DECREASE_FONT_SIZE = "decrease_font_size"
    INCREASE_RATE = "increase_rate"
    DECREASE_RATE = "decrease_rate"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    INCREASE_BRIGHTNESS = "increase_brightness"
    DECREASE_BRIGHTNESS = "decrease_brightness"
    CYCLE_FONT = "cycle_font"
    CYCLE_COLOR = "cycle_color"
    INCREASE_GLOW = "increase_glow"
    DECREASE_GLOW = "decrease_glow"
    TOGGLE_BOLD = "toggle_bold"
    TOGGLE_LANGUAGE = "toggle_language"
    CYCLE_MODE = "cycle_mode"
    TOGGLE_EDIT_MODE = "toggle_edit_mode"
    CLEAR_TEXT = "clear_text"
    TOGGLE_FOCUS_PANEL = "toggle_focus_panel"
    TOGGLE_EXTERNAL_MENU = "toggle_external_menu"
    TOGGLE_BINDINGS_EDITOR = "toggle_bindings_editor"
    TOGGLE_STATS = "toggle_stats"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


DEFAULT_BINDINGS: dict[Action, str] = {
    Action.TOGGLE_PLAYBACK: " ",
    Action.RESET: "r",
    Action.SEEK_PREVIOUS: "ArrowLeft",
    Action.SEEK_NEXT: "ArrowRight",
    Action.INCREASE_FONT_SIZE: "=",
    Action.DECREASE_FONT_SIZE: "-",
    Action.INCREASE_RATE: "ArrowUp",
    Action.DECREASE_RATE: "ArrowDown",
    Action.TOGGLE_FULLSCREEN: "v",
    Action.INCREASE_BRIGHTNESS: "]",
    Action.DECREASE_BRIGHTNESS: "[",
    Action.CYCLE_FONT: "f",
    Action.CYCLE_COLOR: "c",
    Action.INCREASE_GLOW: ".",
    Action.DECREASE_GLOW: ",",
    Action.TOGGLE_BOLD: "b",
    Action.TOGGLE_LANGUAGE: "l",
    Action.CYCLE_MODE: "m",
    Action.TOGGLE_EDIT_MODE: "e",
    Action.CLEAR_TEXT: "Delete",
    Action.TOGGLE_FOCUS_PANEL: "p",
    Action.TOGGLE_EXTERNAL_MENU: "x",
    Action.TOGGLE_BINDINGS_EDITOR: "k",
    Action.TOGGLE_STATS: "s",
}


# Quits the terminal reader, so it can never be bound to an action.
RESERVED_KEYS = frozenset({"q"})


def normalize_key(key: str) -> str:
    """Single characters compare case-insensitively, named keys exactly."""
    return key.lower() if len(key) == 1 else key


def keys_match(bound: str, pressed: str) -> bool:
    return normalize_key(bound) == normalize_key(pressed)


def is_reserved(key: str) -> bool:
    return normalize_key(key) in RESERVED_KEYS


def key_label(key: str) -> str:
    """Display name for a bound key."""
    return "Space" if key == " " else key


def parse_action(name: str) -> Action | None:
    """Action for a config name, or None if unknown."""
    try:
        return Action(name)
    except ValueError:
        return None


class CommandDispatcher:
    """Resolves key presses to actions and runs their handlers."""

    def __init__(
        self,
        bindings: Mapping[str, str] | None = None,
        is_suppressed: Callable[[], bool] | None = None,
        on_rebind: Callable[[Action, str], None] | None = None,
    ):
        self._bindings: dict[Action, str] = dict(DEFAULT_BINDINGS)
        self._handlers: dict[Action, Callable[[], None]] = {}
        self._capturing: Action | None = None
        self.is_suppressed = is_suppressed or (lambda: False)
        self.on_rebind = on_rebind
        if bindings:
            self.update_bindings(bindings)

    # -- bindings ----------------------------------------------------------

    @property
    def bindings(self) -> dict[Action, str]:
        return dict(self._bindings)

    def update_bindings(self, bindings: Mapping[str, str]) -> None:
        """Apply stored bindings keyed by action name. Unknown names are skipped."""
        for name, key in bindings.items():
            action = parse_action(str(name))
            if action is None:
                logger.warning("ignoring binding for unknown action %r", name)
                continue
            if not key:
                logger.warning("ignoring empty binding for %s", action.value)
                continue
            if is_reserved(key):
                logger.warning("ignoring reserved key %r for %s", key, action.value)
                continue
            self._bindings[action] = key

    def rebind(self, action: Action, key: str) -> None:
        """
        Bind one action to a key. Other actions are left untouched.

        Raises:
            ValueError: If the key is reserved
        """
        if is_reserved(key):
            raise ValueError(f"'{key}' is reserved for quitting the reader")
        self._bindings[action] = key
        logger.info("bound %s to %r", action.value, key)
        if self.on_rebind:
            self.on_rebind(action, key)

    def reset_bindings(self) -> None:
        self._bindings = dict(DEFAULT_BINDINGS)

    def to_config(self) -> dict[str, str]:
        """Bindings keyed by action name, for persistence."""
        return {action.value: key for action, key in self._bindings.items()}

    def conflicts(self) -> dict[str, list[Action]]:
        """Keys bound to more than one action."""
        by_key: dict[str, list[Action]] = {}
        for action in Action:
            by_key.setdefault(normalize_key(self._bindings[action]), []).append(action)
        return {key: actions for key, actions in by_key.items() if len(actions) > 1}

    # -- capture -----------------------------------------------------------

    @property
    def capturing(self) -> Action | None:
        """Action waiting for a new key, if any."""
        return self._capturing

    def begin_capture(self, action: Action) -> None:
        self._capturing = action

    def cancel_capture(self) -> None:
        self._capturing = None

    # -- dispatch ----------------------------------------------------------

    def register(self, action: Action, handler: Callable[[], None]) -> None:
        if not isinstance(action, Action):
            raise ValueError(f"Unknown action: {action!r}")
        self._handlers[action] = handler

    def resolve(self, key: str) -> Action | None:
        """First action, in declaration order, bound to this key."""
        for action in Action:
            if keys_match(self._bindings[action], key):
                return action
        return None

    def dispatch(self, key: str) -> Action | None:
        """
        Handle one key press.

        While capturing, the key becomes the new binding and nothing runs.
        A reserved key ends the capture without rebinding.

        Returns:
            The action that ran, or None
        """
        if self._capturing is not None:
            action = self._capturing
            self._capturing = None
            if is_reserved(key):
                logger.info("refused reserved key %r for %s", key, action.value)
                return None
            self.rebind(action, key)
            return None

        if self.is_suppressed():
            return None

        action = self.resolve(key)
        if action is None:
            return None

        handler = self._handlers.get(action)
        if handler is None:
            logger.debug("no handler registered for %s", action.value)
            return None

        handler()
        return action
