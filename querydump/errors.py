"""Exception types raised while producing a dump.

Every fatal condition is a DumpError so the CLI can report it without
catching unrelated exceptions.
"""


class DumpError(Exception):
    """Base class for all dump failures."""


class ConfigurationError(DumpError):
    """Bad settings detected before any row is read (missing alias, unknown format...)."""


class CursorError(DumpError):
    """The row source failed while being iterated."""


class EncodingError(DumpError):
    """A row could not be serialized to the requested format."""


class SinkError(DumpError):
    """Writing to the output stream failed."""
