"""Cell values handed to the encoders.

A cell is exactly one of Null, TextOrBinary or Scalar. Drivers deliver
string and binary columns as raw bytes and numbers as already-typed values;
everything else (DECIMAL, dates, times) is delivered as text bytes too, so it
ends up quoted in SQL output.
"""
from __future__ import annotations

import datetime
from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class TextOrBinary:
    raw: bytes

    def decode(self) -> str:
        # invalid sequences become U+FFFD instead of failing the whole dump
        return self.raw.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Scalar:
    value: Union[int, float, bool]

    @property
    def text(self) -> str:
        if isinstance(self.value, bool):
            return "1" if self.value else "0"
        return str(self.value)


Cell = Union[Null, TextOrBinary, Scalar]
Row = Tuple[Cell, ...]

NULL = Null()


def _timedelta_text(value: datetime.timedelta) -> str:
    # MySQL TIME columns come back as timedelta; render them as [-]HH:MM:SS[.ffffff]
    micro = (value.days * 86400 + value.seconds) * 1000000 + value.microseconds
    sign = "-" if micro < 0 else ""
    total, micro = divmod(abs(micro), 1000000)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micro:
        text += f".{micro:06d}"
    return text


def to_cell(value: Any) -> Cell:
    """Classify one driver value as a Cell."""
    if value is None:
        return NULL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return TextOrBinary(bytes(value))
    if isinstance(value, str):
        return TextOrBinary(value.encode("utf-8"))
    if isinstance(value, (bool, int, float)):
        return Scalar(value)
    if isinstance(value, datetime.timedelta):
        return TextOrBinary(_timedelta_text(value).encode("ascii"))
    if isinstance(value, Decimal):
        # keep the server text, str() would switch to exponent notation
        return TextOrBinary(format(value, "f").encode("ascii"))
    # date, datetime, time and anything unknown use their text form
    return TextOrBinary(str(value).encode("utf-8"))


def to_row(values) -> Row:
    return tuple(to_cell(v) for v in values)
