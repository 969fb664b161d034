"""Serial port: a queue of incoming characters and a record of output."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["Uart"]


def _as_char(c: str | int) -> str:
    if isinstance(c, int):
        return chr(c & 0xFF)
    if len(c) != 1:
        raise ValueError("expected a single character")
    return c


class Uart:
    """A simulated serial line.

    Characters to be received come from ``incoming``; everything sent is kept
    and can be read back with :meth:`output`.
    """

    def __init__(self, incoming: Iterable[str | int] = "") -> None:
        self._incoming = iter(incoming)
        self._sent: list[str] = []

    def put_char(self, c: str | int) -> None:
        """Send one character."""
        self._sent.append(_as_char(c))

    def get_char(self) -> str:
        """Receive the next character; raise EOFError when the line is empty."""
        try:
            return _as_char(next(self._incoming))
        except StopIteration:
            raise EOFError("no more input on the serial line") from None

    def put_chars(self, text: str) -> None:
        """Send text, turning each newline into carriage return plus newline."""
        for c in text.split("\0", 1)[0]:
            if c == "\n":
                self.put_char("\r")
            self.put_char(c)

    def output(self) -> str:
        """Everything sent so far."""
        return "".join(self._sent)