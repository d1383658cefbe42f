"""Append-only byte sink wrapper."""
from __future__ import annotations

from typing import BinaryIO

from .errors import SinkError


class Sink:
    """Wraps a binary stream, counts bytes and turns I/O failures into SinkError."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bytes_written = 0

    def write(self, data: bytes) -> None:
        try:
            self.stream.write(data)
        except (OSError, ValueError) as e:
            # ValueError is what a closed file raises
            raise SinkError(f"Failed to write output: {e}") from e
        self.bytes_written += len(data)

    def flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to flush output: {e}") from e
