"""Cross-platform keyboard input for the reader.

Keys are returned as single characters or, for special keys, as named keys
(``ArrowUp``, ``Enter``, ``Escape`` ...) so they can be compared directly with
the bindings table. Letter case is preserved; the dispatcher decides how to
compare.
"""

import codecs
import os
import select
import sys

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None

ESCAPE_SEQUENCES = {
    "[A": "ArrowUp",
    "[B": "ArrowDown",
    "[C": "ArrowRight",
    "[D": "ArrowLeft",
    "OA": "ArrowUp",
    "OB": "ArrowDown",
    "OC": "ArrowRight",
    "OD": "ArrowLeft",
    "[3~": "Delete",
    "[H": "Home",
    "[F": "End",
}

TTY_PATH = "/dev/tty"

CONTROL_KEYS = {
    "\r": "Enter",
    "\n": "Enter",
    "\t": "Tab",
    "\x7f": "Backspace",
    "\x08": "Backspace",
    "\x1b": "Escape",
}

# msvcrt reports special keys as a prefix byte followed by a scan code.
WINDOWS_SCAN_CODES = {
    "H": "ArrowUp",
    "P": "ArrowDown",
    "M": "ArrowRight",
    "K": "ArrowLeft",
    "S": "Delete",
    "G": "Home",
    "O": "End",
}


def decode_sequence(chars: str) -> str | None:
    """
    Name of a key from the raw characters read for one key press.

    Args:
        chars: Characters read, including a leading ESC for sequences

    Returns:
        Named key, the character itself, or None for unknown sequences
    """
    if not chars:
        return None
    if chars.startswith("\x1b") and len(chars) > 1:
        return ESCAPE_SEQUENCES.get(chars[1:])
    return CONTROL_KEYS.get(chars, chars)


class KeyboardHandler:
    """Non-blocking keyboard input handler.

    Bytes are read straight from the file descriptor. A buffered stream
    would pull a whole escape sequence into its buffer on the first read,
    leaving nothing for ``select`` to report.
    """

    def __init__(self, stream=None, owns_stream: bool = False):
        self.stream = stream or sys.stdin
        self.fd = self.stream.fileno()
        self.owns_stream = owns_stream
        self.old_settings = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._setup()

    def _setup(self):
        """Put the terminal in cbreak mode so keys arrive unbuffered."""
        if termios is None:
            return
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a TTY
            self.old_settings = None

    def _ready(self, timeout: float = 0) -> bool:
        return bool(select.select([self.fd], [], [], timeout)[0])

    def _read_char(self) -> str:
        """One character, reading as many bytes as its UTF-8 encoding needs."""
        while True:
            data = os.read(self.fd, 1)
            if not data:
                return ""
            char = self._decoder.decode(data)
            if char:
                return char

    def get_key(self) -> str | None:
        """
        Get a single key press without blocking.

        Returns the key name or None if no key was pressed.
        """
        if not self._ready():
            return None

        chars = self._read_char()
        if chars == "\x1b":
            # Sequence bytes follow immediately; a lone ESC does not.
            while self._ready(0.01):
                chars += self._read_char()
                if len(chars) > 2 and (chars[-1].isalpha() or chars[-1] == "~"):
                    break
        return decode_sequence(chars)

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None
        if self.owns_stream:
            self.stream.close()
            self.owns_stream = False


class WindowsKeyboardHandler:
    """Keyboard handler for Windows using msvcrt."""

    def __init__(self):
        import msvcrt

        self.msvcrt = msvcrt

    def get_key(self) -> str | None:
        """Get key on Windows."""
        if not self.msvcrt.kbhit():
            return None

        key = self.msvcrt.getwch()
        if key in ("\x00", "\xe0"):
            return WINDOWS_SCAN_CODES.get(self.msvcrt.getwch())
        return decode_sequence(key)

    def stop(self):
        """No cleanup needed on Windows."""


def create_keyboard(stdin=None):
    """
    Keyboard handler for the current platform.

    When text was piped in, stdin is no longer the terminal, so keys are
    read from the controlling terminal instead.

    Raises:
        OSError: If there is no terminal to read keys from
    """
    if sys.platform == "win32":
        # msvcrt reads the console even when stdin is redirected
        return WindowsKeyboardHandler()

    stdin = stdin or sys.stdin
    if stdin.isatty():
        return KeyboardHandler(stdin)
    fd = os.open(TTY_PATH, os.O_RDONLY | os.O_NOCTTY)
    return KeyboardHandler(os.fdopen(fd, "rb", buffering=0), owns_stream=True)
