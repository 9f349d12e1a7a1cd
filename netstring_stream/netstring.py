"""Decoding of D. J. Bernstein's `netstrings <https://cr.yp.to/proto/netstrings.txt>`_
from a byte stream.

A netstring is ``<decimal length>:<payload>,``. :func:`decode` reads exactly
one of them and leaves the stream just past its comma, so a caller with a
stream of netstrings calls it once per record.
"""

from typing import Callable
from typing_extensions import Protocol

from .exceptions import (
    IncompleteNetstring,
    InvalidNetstring,
    LengthOverflow,
    LengthRejected,
    NetstringIOError,
)

MAX_LENGTH = 2 ** 64 - 1

# Upper bound on a single payload read, so a large declared length is
# consumed incrementally instead of being allocated up front.
CHUNK_SIZE = 64 * 1024

_DIGIT_0 = 0x30
_DIGIT_9 = 0x39
_COLON = 0x3a
_COMMA = 0x2c


class ByteSource(Protocol):
    """Anything with a blocking, file-like ``read``. ``b''`` means end of
    input; fewer bytes than requested does not."""
    def read(self, size: int) -> bytes: ...


def accept_any(length: int) -> bool:
    """A validation predicate that accepts every length."""
    return True


def at_most(limit: int) -> Callable[[int], bool]:
    """A validation predicate that accepts lengths up to and including ``limit``.

    >>> at_most(10)(11)
    False
    """
    def accept(length: int) -> bool:
        return length <= limit
    return accept


def _read(stream: ByteSource, size: int) -> bytes:
    try:
        return stream.read(size)
    except OSError as e:
        raise NetstringIOError(f"stream read failed: {e}", e) from e


def _read_byte(stream: ByteSource) -> int:
    b = _read(stream, 1)
    if len(b) == 0:
        raise NetstringIOError("unexpected end of stream")
    return b[0]


def decode_length(stream: ByteSource) -> int:
    """Read the decimal length of a netstring up to and including its colon.

    Raises :class:`LengthOverflow` as soon as the digits read so far exceed
    :data:`MAX_LENGTH`; nothing after the offending digit is consumed.
    """
    length = 0
    while True:
        b = _read_byte(stream)
        if _DIGIT_0 <= b <= _DIGIT_9:
            digit = b - _DIGIT_0
            if length > (MAX_LENGTH - digit) // 10:
                raise LengthOverflow()
            length = length * 10 + digit
        elif b == _COLON:
            return length
        else:
            raise InvalidNetstring("invalid format, malformed message length", b)


def read_payload(stream: ByteSource, length: int, buf: bytearray) -> int:
    """Append exactly ``length`` payload bytes to ``buf``, then consume the
    terminating comma.

    Raises :class:`IncompleteNetstring` if the stream ends inside the
    payload. Whatever was read up to that point remains in ``buf``.
    """
    remaining = length
    while remaining > 0:
        chunk = _read(stream, min(remaining, CHUNK_SIZE))
        if len(chunk) == 0:
            raise IncompleteNetstring(length, length - remaining)
        buf.extend(chunk)
        remaining -= len(chunk)

    b = _read_byte(stream)
    if b != _COMMA:
        raise InvalidNetstring("invalid format, missing comma", b)
    return length


def decode(stream: ByteSource, accept: Callable[[int], bool], buf: bytearray) -> int:
    """Decode one netstring from ``stream``, appending its payload to ``buf``.

    ``accept`` is called once with the declared length before any payload
    byte is read; if it returns ``False``, :class:`LengthRejected` is raised
    and ``buf`` is left untouched. On success the declared length is
    returned and the stream is positioned right after the comma.

    >>> import io
    >>> buf = bytearray()
    >>> decode(io.BytesIO(b'5:hello,more'), accept_any, buf)
    5
    >>> bytes(buf)
    b'hello'
    """
    length = decode_length(stream)
    if not accept(length):
        raise LengthRejected(length)
    return read_payload(stream, length, buf)
