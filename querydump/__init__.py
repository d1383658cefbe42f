"""Dump the result of one SQL query as JSON lines, CSV or batched INSERT statements."""

from .cells import NULL, Cell, Null, Row, Scalar, TextOrBinary, to_cell
from .cursor import RowCursor
from .dump import DumpStats, dump, get_encoder
from .errors import ConfigurationError, CursorError, DumpError, EncodingError, SinkError
from .schemas import ClientOptions, DumpSettings, OutputFormat
from .sink import Sink
from .sql_encoder import InsertBatcher, escape_bytes

__version__ = "1.0.0"

__all__ = [
    "NULL",
    "Cell",
    "Null",
    "Row",
    "Scalar",
    "TextOrBinary",
    "to_cell",
    "RowCursor",
    "DumpStats",
    "dump",
    "get_encoder",
    "ConfigurationError",
    "CursorError",
    "DumpError",
    "EncodingError",
    "SinkError",
    "ClientOptions",
    "DumpSettings",
    "OutputFormat",
    "Sink",
    "InsertBatcher",
    "escape_bytes",
]
