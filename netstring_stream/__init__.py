"""Decoding of length-prefixed netstring records from byte streams."""

from .exceptions import (
    ErrorKind,
    NetstringError,
    NetstringIOError,
    IncompleteNetstring,
    LengthRejected,
    LengthOverflow,
    InvalidNetstring,
    error_kind_table,
)
from .netstring import ByteSource, MAX_LENGTH, accept_any, at_most, decode
from .connection import FileReader, HttpReader, NetstringReader, SocketReader
