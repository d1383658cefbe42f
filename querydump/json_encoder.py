"""Newline-delimited JSON output: one object per row."""
from __future__ import annotations

import json
from typing import Any, Sequence

from .cells import Cell, Null, Row, Scalar, TextOrBinary
from .errors import EncodingError
from .sink import Sink


def json_value(cell: Cell) -> Any:
    if isinstance(cell, Null):
        return None
    if isinstance(cell, TextOrBinary):
        return cell.decode()
    if isinstance(cell, Scalar):
        return cell.value
    raise EncodingError(f"Unsupported cell: {cell!r}")


class JsonLineEncoder:
    def __init__(self, columns: Sequence[str], sink: Sink):
        self.columns = list(columns)
        self.sink = sink
        self.statements = 0

    def begin(self) -> None:
        pass

    def write_row(self, row: Row) -> None:
        # a fresh mapping per row so every key always belongs to this row
        record = {name: json_value(cell) for name, cell in zip(self.columns, row)}
        try:
            line = json.dumps(record, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Failed to encode row as JSON: {e}") from e
        self.sink.write(line.encode("utf-8") + b"\n")

    def end(self) -> None:
        self.sink.flush()
