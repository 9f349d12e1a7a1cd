"""Errors raised while decoding a netstring.

The set of failures is closed: every error raised by
:func:`netstring_stream.netstring.decode` is an instance of exactly one of
the classes below, and its ``kind`` tells which.
"""

from enum import Enum
from typing import Dict, Optional, Type


class ErrorKind(Enum):
    IO = "io"
    INCOMPLETE = "incomplete"
    LENGTH = "length"
    OVERFLOW = "overflow"
    SYNTAX = "syntax"


class NetstringError(Exception):
    """Base class for netstring decoding failures."""
    kind: ErrorKind
    message: str

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NetstringIOError(NetstringError):
    """The stream could not supply a byte the decoder required, either
    because it ended or because the transport failed. ``cause`` is the
    transport's exception, or ``None`` at a plain end of input."""
    kind = ErrorKind.IO
    cause: Optional[BaseException]

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class IncompleteNetstring(NetstringError):
    """The stream ended before the declared number of payload bytes."""
    kind = ErrorKind.INCOMPLETE
    expected: int
    received: int

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"expected {expected} payload bytes, stream ended after {received}")
        self.expected = expected
        self.received = received


class LengthRejected(NetstringError):
    """The caller's validation predicate refused the declared length."""
    kind = ErrorKind.LENGTH
    length: int

    def __init__(self, length: int) -> None:
        super().__init__(f"netstring length {length} rejected")
        self.length = length


class LengthOverflow(NetstringError):
    kind = ErrorKind.OVERFLOW

    def __init__(self) -> None:
        super().__init__("netstring length does not fit in 64 bits")


class InvalidNetstring(NetstringError):
    """Exception for malformed netstrings: a non-digit before the colon or
    a missing terminating comma."""
    kind = ErrorKind.SYNTAX
    found: int

    def __init__(self, message: str, found: int) -> None:
        super().__init__(f"{message}, found {bytes([found])!r}")
        self.found = found


# The canonical mapping from error kinds to exception classes:
error_kind_table : Dict[ErrorKind, Type[NetstringError]] = {
    ErrorKind.IO: NetstringIOError,
    ErrorKind.INCOMPLETE: IncompleteNetstring,
    ErrorKind.LENGTH: LengthRejected,
    ErrorKind.OVERFLOW: LengthOverflow,
    ErrorKind.SYNTAX: InvalidNetstring,
}
