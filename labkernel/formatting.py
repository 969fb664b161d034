"""printf-style formatting with the kernel's 32-bit integer conventions.

Floating-point conversions are not supported, as in the kernel build: they
are echoed back like any unknown conversion.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from enum import IntFlag
from operator import index
from typing import Any

__all__ = ["vsprintf", "sprintf"]


class _Flag(IntFlag):
    NONE = 0
    ZEROPAD = 1
    SIGN = 2
    PLUS = 4
    SPACE = 8
    LEFT = 16
    SPECIAL = 32
    LARGE = 64


_FLAG_CHARS = {
    "-": _Flag.LEFT,
    "+": _Flag.PLUS,
    " ": _Flag.SPACE,
    "#": _Flag.SPECIAL,
    "0": _Flag.ZEROPAD,
}

_LOWER_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_UPPER_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_WORD_BITS = 32
_WORD_MASK = (1 << _WORD_BITS) - 1
_POINTER_WIDTH = 8  # two hex digits per byte of a 32-bit pointer

_SPEC = re.compile(r"%([-+ #0]*)(\*|\d+)?(\.(\*|\d*))?([hlL])?(.?)", re.DOTALL)

_INTEGER_BASES = {"o": 8, "x": 16, "X": 16, "d": 10, "i": 10, "u": 10}


def _signed_word(value: Any) -> int:
    word = index(value) & _WORD_MASK
    return word - (1 << _WORD_BITS) if word >> (_WORD_BITS - 1) else word


def _unsigned_word(value: Any) -> int:
    return index(value) & _WORD_MASK


def _pad(text: str, width: int, left: bool) -> str:
    fill = " " * max(width - len(text), 0)
    return text + fill if left else fill + text


def _digits(value: int, base: int, large: bool) -> str:
    table = _UPPER_DIGITS if large else _LOWER_DIGITS
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, base)
        out.append(table[rem])
    return "".join(reversed(out))


def _number(value: int, base: int, size: int, precision: int, flags: _Flag) -> str:
    if flags & _Flag.LEFT:
        flags &= ~_Flag.ZEROPAD
    fill = "0" if flags & _Flag.ZEROPAD else " "

    sign = ""
    if flags & _Flag.SIGN:
        if value < 0:
            sign, value = "-", -value
        elif flags & _Flag.PLUS:
            sign = "+"
        elif flags & _Flag.SPACE:
            sign = " "
    if sign:
        size -= 1

    prefix = ""
    if flags & _Flag.SPECIAL:
        if base == 16:
            prefix = "0x"
        elif base == 8:
            prefix = "0"
    size -= len(prefix)

    body = _digits(value, base, bool(flags & _Flag.LARGE))
    precision = max(precision, len(body))
    size -= precision

    out = []
    if not flags & (_Flag.ZEROPAD | _Flag.LEFT):
        out.append(" " * max(size, 0))
        size = 0
    out.append(sign)
    out.append(prefix)
    if not flags & _Flag.LEFT:
        out.append(fill * max(size, 0))
        size = 0
    out.append("0" * (precision - len(body)))
    out.append(body)
    out.append(" " * max(size, 0))
    return "".join(out)


def _as_bytes(addr: Any, count: int) -> bytes:
    data = bytes(addr)
    if len(data) < count:
        raise ValueError(f"address needs {count} bytes, got {len(data)}")
    return data[:count]


def _ethernet(addr: Any, width: int, flags: _Flag) -> str:
    table = _UPPER_DIGITS if flags & _Flag.LARGE else _LOWER_DIGITS
    text = ":".join(table[b >> 4] + table[b & 0x0F] for b in _as_bytes(addr, 6))
    return _pad(text, width, bool(flags & _Flag.LEFT))


def _ipv4(addr: Any, width: int, flags: _Flag) -> str:
    text = ".".join(str(b) for b in _as_bytes(addr, 4))
    return _pad(text, width, bool(flags & _Flag.LEFT))


def _char(arg: Any, width: int, flags: _Flag) -> str:
    if isinstance(arg, str):
        if len(arg) != 1:
            raise TypeError("%c requires a single character")
        ch = arg
    else:
        ch = chr(index(arg) & 0xFF)
    return _pad(ch, width, bool(flags & _Flag.LEFT))


def _string(arg: Any, width: int, precision: int, flags: _Flag) -> str:
    if arg is None:
        text = "<NULL>"
    elif isinstance(arg, (bytes, bytearray)):
        text = bytes(arg).decode("latin-1")
    elif isinstance(arg, str):
        text = arg
    else:
        raise TypeError(f"%s requires a string, not {type(arg).__name__}")
    text = text.split("\0", 1)[0]
    if precision >= 0:
        text = text[:precision]
    return _pad(text, width, bool(flags & _Flag.LEFT))


def vsprintf(fmt: str, args: Iterable[Any]) -> str:
    """Format ``args`` according to ``fmt`` and return the resulting text.

    A ``%n`` conversion takes a callable that receives the number of
    characters written so far.
    """
    fmt = fmt.split("\0", 1)[0]
    pending = iter(args)

    def take() -> Any:
        try:
            return next(pending)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out: list[str] = []
    pos = 0
    while True:
        start = fmt.find("%", pos)
        if start < 0:
            out.append(fmt[pos:])
            break
        out.append(fmt[pos:start])
        match = _SPEC.match(fmt, start)
        assert match is not None  # the pattern matches any text after '%'
        pos = match.end()
        flag_text, width_text, dot, precision_text, qualifier, conv = match.groups()

        flags = _Flag.NONE
        for ch in flag_text:
            flags |= _FLAG_CHARS[ch]

        width = -1
        if width_text == "*":
            width = index(take())
            if width < 0:
                width = -width
                flags |= _Flag.LEFT
        elif width_text:
            width = int(width_text)

        precision = -1
        if dot:
            if precision_text == "*":
                precision = index(take())
            elif precision_text:
                precision = int(precision_text)
            precision = max(precision, 0)

        if conv == "c":
            out.append(_char(take(), width, flags))
        elif conv == "s":
            out.append(_string(take(), width, precision, flags))
        elif conv == "p":
            if width == -1:
                width = _POINTER_WIDTH
                flags |= _Flag.ZEROPAD
            out.append(_number(_unsigned_word(take()), 16, width, precision, flags))
        elif conv == "n":
            target: Callable[[int], Any] = take()
            if not callable(target):
                raise TypeError("%n requires a callable")
            target(sum(map(len, out)))
        elif conv in ("a", "A"):
            if conv == "A":
                flags |= _Flag.LARGE
            render = _ethernet if qualifier == "l" else _ipv4
            out.append(render(take(), width, flags))
        elif conv in _INTEGER_BASES:
            if conv == "X":
                flags |= _Flag.LARGE
            if conv in ("d", "i"):
                flags |= _Flag.SIGN
                value = _signed_word(take())
            else:
                value = _unsigned_word(take())
            out.append(_number(value, _INTEGER_BASES[conv], width, precision, flags))
        else:
            if conv != "%":
                out.append("%")
            out.append(conv)
            if not conv:
                break
    return "".join(out)


def sprintf(fmt: str, *args: Any) -> str:
    """Format the positional ``args`` according to ``fmt``."""
    return vsprintf(fmt, args)