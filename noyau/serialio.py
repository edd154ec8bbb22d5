"""Minimal printf-style formatting and a character console over text streams."""

from __future__ import annotations

import operator
import re
import sys
from typing import Any, Iterator, TextIO

__all__ = ["sformat", "SerialConsole"]

_PAD_RIGHT = 1
_PAD_ZERO = 2

# A conversion: optional '-', any run of '0', a width, then one conversion
# character (absent when the format ends right after the '%').
_SPEC = re.compile(r"%(-?)(0*)(\d*)(.?)", re.DOTALL)


def _pad(text: str, width: int, flags: int) -> str:
    fill = "0" if flags & _PAD_ZERO else " "
    missing = max(width - len(text), 0)
    if flags & _PAD_RIGHT:
        return text + fill * missing
    return fill * missing + text


def _to_int32(value: Any) -> int:
    number = operator.index(value) & 0xFFFFFFFF
    return number - 0x100000000 if number & 0x80000000 else number


def _format_int(value: Any, base: int, signed: bool, width: int, flags: int, upper: bool) -> str:
    number = _to_int32(value)
    if number == 0:
        return _pad("0", width, flags)

    negative = signed and base == 10 and number < 0
    magnitude = -number if negative else number & 0xFFFFFFFF
    if base == 16:
        digits = format(magnitude, "X" if upper else "x")
    else:
        digits = str(magnitude)

    if negative:
        if width and flags & _PAD_ZERO:
            return "-" + _pad(digits, width - 1, flags)
        digits = "-" + digits
    return _pad(digits, width, flags)


def _next_arg(values: Iterator[Any]) -> Any:
    try:
        return next(values)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def _convert(match: re.Match, values: Iterator[Any]) -> str:
    minus, zeros, digits, conv = match.groups()
    if conv == "%" and not (minus or zeros or digits):
        return "%"

    flags = (_PAD_RIGHT if minus else 0) | (_PAD_ZERO if zeros else 0)
    width = int(digits) if digits else 0

    if conv == "s":
        value = _next_arg(values)
        return _pad("(null)" if value is None else str(value), width, flags)
    if conv == "d":
        return _format_int(_next_arg(values), 10, True, width, flags, False)
    if conv == "x":
        return _format_int(_next_arg(values), 16, False, width, flags, False)
    if conv == "X":
        return _format_int(_next_arg(values), 16, False, width, flags, True)
    if conv == "u":
        return _format_int(_next_arg(values), 10, False, width, flags, False)
    if conv == "c":
        value = _next_arg(values)
        char = value[:1] if isinstance(value, str) else chr(operator.index(value) & 0xFF)
        return _pad("" if char == "\0" else char, width, flags)
    # Unknown conversion characters are swallowed without consuming an argument.
    return ""


def sformat(fmt: str, *args: Any) -> str:
    """Format ``args`` with the s, d, x, X, u and c conversions and padding options."""
    values = iter(args)
    pieces = []
    position = 0
    for match in _SPEC.finditer(fmt):
        pieces.append(fmt[position:match.start()])
        pieces.append(_convert(match, values))
        position = match.end()
    pieces.append(fmt[position:])
    return "".join(pieces)


class SerialConsole:
    """A serial-line style console: newlines go out as CR LF."""

    def __init__(self, output: TextIO | None = None, input: TextIO | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self.input = input if input is not None else sys.stdin

    def write_char(self, c: str | int) -> int:
        """Write one character and return its code as an unsigned byte."""
        char = c if isinstance(c, str) else chr(c & 0xFF)
        if char == "\n":
            self.output.write("\r")
        self.output.write(char)
        return ord(char) & 0xFF

    def write_line(self, s: str) -> int:
        """Write a string followed by a newline."""
        for char in s:
            self.write_char(char)
        return self.write_char("\n")

    def printf(self, fmt: str, *args: Any) -> int:
        """Format and write; return the number of characters produced."""
        text = sformat(fmt, *args)
        for char in text:
            self.write_char(char)
        return len(text)

    def read_char(self) -> str:
        """Read one character; raise EOFError when the input is exhausted."""
        char = self.input.read(1)
        if not char:
            raise EOFError("no more input")
        return char