"""Single-pass row source aligned to a fixed column set."""
from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from sqlalchemy.exc import SQLAlchemyError

from .cells import Row, to_row
from .errors import ConfigurationError, CursorError


class RowCursor:
    """Lazy, finite, non-restartable sequence of Rows.

    `columns` is read once, before iteration. `rows` yields raw driver tuples
    which are converted to cells one at a time.
    """

    def __init__(self, columns: Sequence[str], rows: Iterable[Sequence]):
        columns = [str(c) for c in columns]
        seen = set()
        for name in columns:
            if name in seen:
                raise ConfigurationError(f"Duplicate column name in result: {name!r}")
            seen.add(name)
        self.columns = columns
        self._rows = rows
        self._consumed = False

    @classmethod
    def from_result(cls, result) -> "RowCursor":
        """Adapt a SQLAlchemy CursorResult."""
        return cls(list(result.keys()), result)

    def __iter__(self) -> Iterator[Row]:
        if self._consumed:
            raise CursorError("Cursor was already consumed and cannot be restarted")
        self._consumed = True
        return self._iterate()

    def _iterate(self) -> Iterator[Row]:
        width = len(self.columns)
        try:
            for values in self._rows:
                if len(values) != width:
                    raise CursorError(f"Row has {len(values)} values, expected {width}")
                yield to_row(values)
        except SQLAlchemyError as e:
            raise CursorError(f"Failed to fetch row: {e}") from e
