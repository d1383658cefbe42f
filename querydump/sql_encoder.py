"""
SQL Batch Insert Encoder
========================

Turns rows into `INSERT [IGNORE] INTO ... VALUES (...), (...);` statements.

Tuples are accumulated in a byte buffer and the statement is written out as
soon as the buffer reaches the configured batch size. The check runs after a
tuple is appended, so every batch except the last is at least the batch size
and can overshoot it by up to one tuple.
"""
from __future__ import annotations

import enum
import logging
import math
import re
from typing import Optional, Sequence

from .cells import Cell, Null, Row, Scalar, TextOrBinary
from .errors import ConfigurationError, EncodingError
from .sink import Sink

logger = logging.getLogger(__name__)


# =============================================================================
# LITERALS
# =============================================================================

_ESCAPES = {
    b"\x00": b"\\0",
    b"\n": b"\\n",
    b"\r": b"\\r",
    b"\\": b"\\\\",
    b"'": b"\\'",
    b'"': b'\\"',
    b"\x1a": b"\\Z",
}

_ESCAPE_RE = re.compile(b"[\x00\n\r\\\\'\"\x1a]")


def escape_bytes(value: bytes) -> bytes:
    """Escape raw bytes for use inside a single-quoted MySQL string literal.

    Works byte by byte and never decodes, so any single-byte or UTF-8 payload
    survives unchanged apart from the seven escaped bytes.
    """
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group()], value)


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def sql_literal(cell: Cell) -> bytes:
    if isinstance(cell, Null):
        return b"NULL"
    if isinstance(cell, TextOrBinary):
        return b"'" + escape_bytes(cell.raw) + b"'"
    if isinstance(cell, Scalar):
        if isinstance(cell.value, float) and not math.isfinite(cell.value):
            raise EncodingError(f"Cannot render {cell.value!r} as a SQL literal")
        return cell.text.encode("ascii")
    raise EncodingError(f"Unsupported cell: {cell!r}")


def render_tuple(row: Row) -> bytes:
    return b"(" + b", ".join(sql_literal(cell) for cell in row) + b")"


# =============================================================================
# STATEMENT PARTS
# =============================================================================

def insert_header(alias: str, columns: Sequence[str], ignore: bool = False) -> bytes:
    fields = ", ".join(quote_identifier(c) for c in columns)
    ignore_statement = "IGNORE " if ignore else ""
    return f"INSERT {ignore_statement}INTO {quote_identifier(alias)} ({fields}) VALUES\n".encode("utf-8")


def on_duplicate_key_clause(columns: Sequence[str]) -> bytes:
    updates = ",\n".join(f"{quote_identifier(c)} = VALUES({quote_identifier(c)})" for c in columns)
    return f"\nON DUPLICATE KEY UPDATE\n{updates}".encode("utf-8")


def charset_preamble(charset: str) -> bytes:
    return (
        "SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT;\n"
        f"SET NAMES {charset};\n\n"
    ).encode("ascii")


def charset_postamble() -> bytes:
    return b"\nSET CHARACTER_SET_CLIENT=@OLD_CHARACTER_SET_CLIENT;\n"


def batch_threshold(batch_size_kib: float) -> int:
    """Convert a batch size in KiB to a byte threshold."""
    return int(math.floor(1024 * batch_size_kib))


# =============================================================================
# BATCHING
# =============================================================================

class BatchState(str, enum.Enum):
    empty = "empty"
    accumulating = "accumulating"


class InsertBatcher:
    """Accumulates rendered tuples into INSERT statements.

    No I/O happens here: `add` and `finish` return the finished statement
    bytes (or None) and the caller decides where they go. A threshold of zero
    or below flushes after every tuple.

    States: EMPTY -> add -> ACCUMULATING -> threshold reached -> EMPTY.
    `finish` flushes a pending ACCUMULATING buffer and leaves the batcher EMPTY.
    """

    def __init__(self, header: bytes, threshold: int, suffix: bytes = b""):
        self.header = header
        self.threshold = threshold
        self.suffix = suffix
        self._buffer = bytearray()
        self._needs_comma = False

    @property
    def state(self) -> BatchState:
        return BatchState.accumulating if self._buffer else BatchState.empty

    def __len__(self) -> int:
        return len(self._buffer)

    def add(self, values: bytes) -> Optional[bytes]:
        if not self._buffer:
            self._buffer += self.header
        if self._needs_comma:
            self._buffer += b",\n"
        self._buffer += values
        self._needs_comma = True

        if len(self._buffer) >= self.threshold:
            return self._flush()
        return None

    def finish(self) -> Optional[bytes]:
        if self._buffer:
            return self._flush()
        return None

    def _flush(self) -> bytes:
        self._buffer += self.suffix
        self._buffer += b";\n"
        statement = bytes(self._buffer)
        self._buffer.clear()
        self._needs_comma = False
        return statement


# =============================================================================
# ENCODER
# =============================================================================

class SqlInsertEncoder:
    """Writes rows as batched INSERT statements into `alias`.

    Raises:
        ConfigurationError: if alias is empty. Raised from the constructor so
            nothing is read or written.
    """

    def __init__(
        self,
        columns: Sequence[str],
        sink: Sink,
        alias: Optional[str],
        insert_ignore: bool = False,
        on_duplicate_key_update: bool = False,
        batch_size: float = 1024,
        charset: str = "utf8",
        set_names: bool = True,
    ):
        if not alias:
            raise ConfigurationError("Alias must be specified for sql format")
        if set_names and not re.fullmatch(r"\w+", charset or ""):
            raise ConfigurationError(f"Invalid character set name: {charset!r}")

        self.columns = list(columns)
        self.sink = sink
        self.charset = charset
        self.set_names = set_names
        self.statements = 0

        suffix = on_duplicate_key_clause(self.columns) if on_duplicate_key_update else b""
        self.batcher = InsertBatcher(
            insert_header(alias, self.columns, ignore=insert_ignore),
            batch_threshold(batch_size),
            suffix,
        )

    def _emit(self, statement: Optional[bytes]) -> None:
        if statement is None:
            return
        self.sink.write(statement)
        self.statements += 1
        logger.debug(
            "Flushed INSERT batch",
            extra={"event": "batch_flushed", "context": {"bytes": len(statement), "statement": self.statements}},
        )

    def begin(self) -> None:
        if self.set_names:
            self.sink.write(charset_preamble(self.charset))

    def write_row(self, row: Row) -> None:
        self._emit(self.batcher.add(render_tuple(row)))

    def end(self) -> None:
        self._emit(self.batcher.finish())
        if self.set_names:
            self.sink.write(charset_postamble())
        self.sink.flush()
