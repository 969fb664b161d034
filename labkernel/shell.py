"""A line-oriented command shell reading from the serial line."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .console import Console
from .strings import compare_strings, copy_limited
from .uart import Uart

__all__ = [
    "Command",
    "Shell",
    "split_words",
    "NAME_LIMIT",
    "DESCRIPTION_LIMIT",
    "CMDLINE_LIMIT",
    "ARGV_LIMIT",
    "PROMPT",
]

NAME_LIMIT = 20
DESCRIPTION_LIMIT = 100
CMDLINE_LIMIT = 100
ARGV_LIMIT = 10
PROMPT = "xlanchen >:"

_TEXT_COLOR = 0x7
_PROMPT_COLOR = 0x3
_SEPARATORS = " \n"


@dataclass(frozen=True)
class Command:
    """A registered command: its name, body, optional help and description."""

    name: str
    func: Callable[[list[str]], object]
    help_func: Callable[[], object] | None
    description: str


def _split(cmdline: str, limit: int) -> tuple[list[str], bool]:
    """Split into words; also report whether the word limit cut the line short."""
    text = cmdline.split("\0", 1)[0]
    spans: list[list[int]] = []
    in_word = False
    for pos, c in enumerate(text):
        if len(spans) >= limit:
            if in_word:
                # The last word was never terminated, so it runs to the line's end.
                spans[-1][1] = len(text)
            return [text[s:e] for s, e in spans], True
        if c in _SEPARATORS:
            in_word = False
        elif in_word:
            spans[-1][1] = pos + 1
        else:
            spans.append([pos, pos + 1])
            in_word = True
    return [text[s:e] for s, e in spans], False


def split_words(cmdline: str, limit: int) -> list[str]:
    """Split a command line on spaces and newlines into at most ``limit`` words."""
    return _split(cmdline, limit)[0]


class Shell:
    """Reads command lines from the serial line and runs registered commands."""

    def __init__(self, console: Console, uart: Uart) -> None:
        self.console = console
        self.uart = uart
        self._commands: list[Command] = []
        self.add_command("cmd", self.list_commands, None, "list all registered commands")
        self.add_command("help", self.help, self._help_usage, "help [cmd]")

    @property
    def commands(self) -> tuple[Command, ...]:
        """Registered commands, most recently added first."""
        return tuple(self._commands)

    def add_command(
        self,
        name: str,
        func: Callable[[list[str]], object],
        help_func: Callable[[], object] | None = None,
        description: str = "",
    ) -> Command:
        """Register a command; a newer command hides an older one of the same name."""
        command = Command(
            copy_limited(name, NAME_LIMIT),
            func,
            help_func,
            copy_limited(description, DESCRIPTION_LIMIT),
        )
        self._commands.insert(0, command)
        return command

    def list_commands(self, argv: Sequence[str] = ()) -> int:
        """Print every registered command with its description."""
        self.console.printf(_TEXT_COLOR, "list all registered commands:\n")
        self.console.printf(_TEXT_COLOR, "command name: description\n")
        for command in self._commands:
            self.console.printf(
                _TEXT_COLOR, "% 12s: %s\n", command.name, command.description
            )
        return 0

    def _help_usage(self) -> None:
        self.console.printf(_TEXT_COLOR, "USAGE: help [cmd]\n\n")

    def help(self, argv: Sequence[str] = ()) -> int:
        """Show the command list, or the help of the command named in ``argv[1]``."""
        self._help_usage()
        if len(argv) <= 1:
            return self.list_commands(argv)
        if len(argv) > 2:
            return 1
        command = self.find_command(argv[1])
        if command is not None:
            if command.help_func is not None:
                command.help_func()
            else:
                self.console.printf(_TEXT_COLOR, "%s\n", command.description)
        return 0

    def find_command(self, name: str) -> Command | None:
        """The most recently registered command called ``name``, if any."""
        return next(
            (c for c in self._commands if compare_strings(name, c.name) == 0), None
        )

    def read_cmdline(self, limit: int = CMDLINE_LIMIT) -> str:
        """Read and echo characters until carriage return or ``limit`` characters.

        A line ended by carriage return is returned with a trailing newline.
        """
        chars: list[str] = []
        while len(chars) < limit:
            c = self.uart.get_char()
            if c == "\r":
                self.uart.put_char("\r")
                self.uart.put_char("\n")
                return "".join(chars) + "\n"
            self.uart.put_char(c)
            chars.append(c)
        return "".join(chars)

    def run_line(self, line: str) -> object:
        """Run one command line; return what the command returned."""
        words, truncated = _split(line, ARGV_LIMIT)
        if truncated:
            self.console.printf(_TEXT_COLOR, "cmdline is tooooo long\n")
        if not words:
            return None
        command = self.find_command(words[0])
        if command is None:
            self.console.printf(_TEXT_COLOR, "UNKOWN command: %s\n", words[0])
            return None
        return command.func(words)

    def start(self) -> None:
        """Prompt, read and run command lines until the serial input runs out."""
        while True:
            self.console.printf(_PROMPT_COLOR, PROMPT)
            try:
                line = self.read_cmdline()
            except EOFError:
                return
            self.console.printf(_TEXT_COLOR, "%s", line)
            self.run_line(line)