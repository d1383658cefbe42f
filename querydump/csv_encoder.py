"""CSV output using the standard csv writer."""
from __future__ import annotations

import csv
import io
from typing import Sequence

from .cells import Cell, Null, Row, Scalar, TextOrBinary
from .errors import EncodingError
from .sink import Sink


# Representation of NULL values in CSV
NULL_REPRESENTATION = ""


def csv_field(cell: Cell) -> str:
    if isinstance(cell, Null):
        return NULL_REPRESENTATION
    if isinstance(cell, TextOrBinary):
        return cell.decode()
    if isinstance(cell, Scalar):
        return cell.text
    raise EncodingError(f"Unsupported cell: {cell!r}")


class CsvEncoder:
    """Writes one minimally-quoted record per row.

    Records are formatted into a small text buffer and handed to the sink as
    UTF-8 bytes right away, so nothing beyond one row is held in memory.
    """

    def __init__(self, columns: Sequence[str], sink: Sink, header: bool = False):
        self.columns = list(columns)
        self.sink = sink
        self.header = header
        self.statements = 0
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)

    def _write_record(self, record: list) -> None:
        if record == [""]:
            # csv.writer quotes a lone empty field; write an empty record instead
            self.sink.write(b"\n")
            return
        try:
            self._writer.writerow(record)
        except csv.Error as e:
            raise EncodingError(f"Failed to format CSV record: {e}") from e
        data = self._buffer.getvalue()
        self._buffer.seek(0)
        self._buffer.truncate()
        self.sink.write(data.encode("utf-8"))

    def begin(self) -> None:
        if self.header:
            self._write_record(self.columns)

    def write_row(self, row: Row) -> None:
        self._write_record([csv_field(cell) for cell in row])

    def end(self) -> None:
        self.sink.flush()
