"""Raw terminal key input.

The terminal is switched to cbreak mode for the lifetime of the session
and a daemon thread turns incoming bytes into key names that it posts to
the UI queue.
"""

import logging
import os
import select
import sys
import termios
import threading
import tty
from collections.abc import Callable
from typing import TextIO

logger = logging.getLogger(__name__)

ESC = b"\x1b"

KEY_NAMES: dict[bytes, str] = {
    b"\r": "enter",
    b"\n": "enter",
    b"\t": "tab",
    b" ": "space",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\x03": "ctrl+c",
    b"\x04": "ctrl+d",
    ESC: "esc",
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
    b"\x1b[H": "home",
    b"\x1b[F": "end",
    b"\x1b[5~": "pgup",
    b"\x1b[6~": "pgdown",
    b"\x1b[3~": "delete",
}

# Seconds to wait for the rest of an escape sequence
_SEQUENCE_TIMEOUT = 0.02
_MAX_SEQUENCE = 8


def decode_key(data: bytes) -> str | None:
    """Translate raw terminal bytes into a key name.

    Args:
        data: Bytes of one key press.

    Returns:
        Key name such as "up" or "enter", the character itself for
        printable input, or None for sequences that are not understood.
    """
    name = KEY_NAMES.get(data)
    if name is not None:
        return name
    if data.startswith(ESC):
        return None
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if len(text) == 1 and text.isprintable():
        return text
    return None


def _utf8_length(first: int) -> int:
    if first >= 0xF0:
        return 4
    if first >= 0xE0:
        return 3
    if first >= 0xC0:
        return 2
    return 1


class RawTerminal:
    """Context manager that puts a terminal into cbreak mode.

    Args:
        stream: Terminal input stream.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin
        self._fd = self._stream.fileno()
        self._saved: list | None = None

    def __enter__(self) -> "RawTerminal":
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, *exc: object) -> None:
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def _ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def read_key(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for one key press.

        Returns:
            Key name, or None on timeout or unknown input.
        """
        if not self._ready(timeout):
            return None

        data = os.read(self._fd, 1)
        if not data:
            return None

        if data == ESC:
            while len(data) < _MAX_SEQUENCE and self._ready(_SEQUENCE_TIMEOUT):
                data += os.read(self._fd, 1)
                if len(data) > 2 and (data[-1:].isalpha() or data.endswith(b"~")):
                    break
        else:
            remaining = _utf8_length(data[0]) - 1
            if remaining > 0:
                data += os.read(self._fd, remaining)

        key = decode_key(data)
        if key is None:
            logger.debug("Ignoring unknown input %r", data)
        return key


class KeyReader:
    """Daemon thread that posts key presses read from a terminal.

    Args:
        terminal: Terminal to read from.
        post: Callable receiving each key name.
        poll_interval: Seconds between checks of the stop flag.
    """

    def __init__(
        self,
        terminal: RawTerminal,
        post: Callable[[str], None],
        poll_interval: float = 0.1,
    ) -> None:
        self._terminal = terminal
        self._post = post
        self._poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="ctxgen-keys", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._thread.join(timeout=1.0)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                key = self._terminal.read_key(self._poll_interval)
            except OSError:
                logger.exception("Terminal input failed")
                self._post("ctrl+c")
                return
            if key is not None:
                self._post(key)
