# terminal.py
#
# Description:
# Blocking terminal input and styled output. read_line() and read_key()
# keep prompting until the input is accepted. Single keys are read with the
# terminal in raw mode, which is always restored afterwards.
#

import os
import re
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Callable, Iterable, Optional, Pattern, Union

import structlog
from rich.console import Console
from rich.text import Text

from settings import BLOCK_WIDTH

logger = structlog.get_logger(__name__)

ANY_TEXT = re.compile(r".*")
NON_EMPTY = re.compile(r".+")
NUMBER = re.compile(r"[0-9]+")

CTRL_C = "\x03"
ESCAPE = "\x1b"

# Enough for any escape sequence a single key press produces
KEY_CHUNK_SIZE = 32

Prompt = Union[str, Text]


class Terminal:
    """Reads validated input from a stream and writes rich output to a console."""

    def __init__(self, console: Optional[Console] = None, stdin=None):
        self.console = console or Console(highlight=False)
        self.stdin = stdin if stdin is not None else sys.stdin

    # --- Output ---

    def write(self, text: Prompt):
        """Writes text as-is, without a trailing newline."""
        self.console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def break_line(self, lines: int = 1):
        self.console.out("\n" * (lines - 1), highlight=False)

    def say(self, message: Prompt, style: str = ""):
        """Prints one line in the given style. Message text is never parsed as markup."""
        text = message if isinstance(message, Text) else Text(message, style=style)
        self.console.print(text, soft_wrap=True)

    def print_title(self, title: str, style: str = "", divider: str = " "):
        """Prints title centred in a block of '=' signs, BLOCK_WIDTH wide."""
        equal_signs = "=" * ((BLOCK_WIDTH - len(title) - 2) // 2)
        self.say(f"{equal_signs}{divider}{title}{divider}{equal_signs}", style)

    # --- Input ---

    def read_line(self, accepted: Pattern = ANY_TEXT, prompt: Optional[Prompt] = None) -> str:
        """
        Reads a full line, stripped of surrounding whitespace.

        Args:
            accepted: Pattern the whole line has to match.
            prompt: Shown before reading and again after invalid input.

        Raises:
            EOFError: If the input stream is closed.
        """
        return self._request_input(
            self._read_line,
            lambda line: accepted.fullmatch(line) is not None,
            prompt,
        )

    def read_key(self, accepted: Iterable[str], prompt: Optional[Prompt] = None) -> str:
        """
        Reads a single keystroke.

        Args:
            accepted: Keys that may be pressed; compared ignoring case.
            prompt: Shown before reading and again after invalid input.

        Returns:
            The key as typed.

        Raises:
            EOFError: If the input stream is closed.
            KeyboardInterrupt: If Ctrl-C is pressed.
        """
        keys = {key.lower() for key in accepted}
        return self._request_input(
            self._read_key,
            lambda key: len(key) == 1 and key.lower() in keys,
            prompt,
        )

    @contextmanager
    def raw_mode(self):
        """Puts a tty stdin into raw mode for the duration of the block."""
        if not self.stdin.isatty():
            yield
            return
        fd = self.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        tty.setraw(fd)
        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def _request_input(
        self,
        read: Callable[[], str],
        accept: Callable[[str], bool],
        prompt: Optional[Prompt] = None,
    ) -> str:
        if prompt is None:
            prompt = Text.assemble((">", "on red"), " ")
        self.write(prompt)
        while True:
            value = read()
            if accept(value):
                return value
            logger.debug("input_rejected", value=value)
            self.say("Invalid input!", "red")
            self.write(prompt)

    def _read_line(self) -> str:
        line = self.stdin.readline()
        if not line:
            raise EOFError("input stream closed")
        return line.strip()

    def _read_key(self) -> str:
        """Reads everything one key press sends; arrow keys and the like come back whole."""
        with self.raw_mode():
            if self.stdin.isatty():
                key = os.read(self.stdin.fileno(), KEY_CHUNK_SIZE).decode("utf-8", errors="replace")
            else:
                key = self._read_sequence()
        if not key:
            raise EOFError("input stream closed")
        # Raw mode turns off signal generation, so Ctrl-C arrives as a byte
        if CTRL_C in key:
            raise KeyboardInterrupt
        return key

    def _read_sequence(self) -> str:
        key = self.stdin.read(1)
        if key != ESCAPE:
            return key
        # CSI (ESC [) and SS3 (ESC O) sequences end with a byte in @..~
        follower = self.stdin.read(1)
        key += follower
        if follower not in ("[", "O"):
            return key
        while True:
            char = self.stdin.read(1)
            key += char
            if not char or "@" <= char <= "~":
                return key
