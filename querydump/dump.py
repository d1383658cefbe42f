"""Select an encoder for the requested format and drive it over a cursor."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .csv_encoder import CsvEncoder
from .cursor import RowCursor
from .errors import ConfigurationError
from .json_encoder import JsonLineEncoder
from .schemas import DumpSettings, OutputFormat
from .sink import Sink
from .sql_encoder import SqlInsertEncoder

logger = logging.getLogger(__name__)


@dataclass
class DumpStats:
    rows: int = 0
    bytes_written: int = 0
    statements: int = 0


def get_encoder(settings: DumpSettings, columns: Sequence[str], sink: Sink):
    """Build the encoder for settings.format.

    Raises:
        ConfigurationError: unknown format, or sql without an alias.
    """
    try:
        fmt = OutputFormat(settings.format)
    except ValueError:
        raise ConfigurationError(
            f"Unknown format {settings.format!r}, expected one of: "
            + ", ".join(f.value for f in OutputFormat)
        )

    if fmt == OutputFormat.json:
        return JsonLineEncoder(columns, sink)
    if fmt == OutputFormat.csv:
        return CsvEncoder(columns, sink, header=settings.csv_header)
    return SqlInsertEncoder(
        columns,
        sink,
        alias=settings.alias,
        insert_ignore=settings.insert_ignore,
        on_duplicate_key_update=settings.on_duplicate_key_update,
        batch_size=settings.batch_size,
        charset=settings.charset,
        set_names=settings.set_names,
    )


def dump(cursor: RowCursor, sink: Sink, settings: DumpSettings) -> DumpStats:
    """Stream every row of `cursor` into `sink`.

    The encoder is built (and validated) before the first row is requested,
    so configuration errors leave the sink untouched. Any later error aborts
    the dump; whatever was already written stays written.
    """
    encoder = get_encoder(settings, cursor.columns, sink)
    stats = DumpStats()

    encoder.begin()
    for row in cursor:
        encoder.write_row(row)
        stats.rows += 1
    encoder.end()

    stats.bytes_written = sink.bytes_written
    stats.statements = encoder.statements
    logger.info(
        "Dump finished",
        extra={"event": "dump_finished", "context": {"format": settings.format, **stats.__dict__}},
    )
    return stats
