"""Readers that pull successive netstrings off a transport."""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
import requests
import socket
import sys
import urllib3
from typing import IO, Iterator, Optional, TextIO, Union

from . import netstring
from .exceptions import NetstringError, NetstringIOError

# Lengths of ten or more digits are approximately 1GB or more, which is
# larger than a reader should buffer by default.
DEFAULT_MAX_LENGTH = 1 << 30


class PeekableSource:
    """A ``ByteSource`` that can look at the next byte without consuming it,
    so that a clean end of input between records can be told apart from a
    truncated record."""
    inner: netstring.ByteSource
    pending: bytes

    def __init__(self, inner: netstring.ByteSource) -> None:
        self.inner = inner
        self.pending = b''

    def peek(self) -> bytes:
        """Return the next byte, or ``b''`` at end of input."""
        if not self.pending:
            self.pending = self.inner.read(1)
        return self.pending

    def read(self, size: int) -> bytes:
        if self.pending and size > 0:
            b = self.pending
            self.pending = b''
            return b
        return self.inner.read(size)


class HttpBodySource:
    """A ``ByteSource`` over a streamed HTTP response body. urllib3 reports a
    dropped connection, a short body or a read timeout with its own
    exceptions rather than ``OSError``; they surface as ``NetstringIOError``."""
    raw: netstring.ByteSource

    def __init__(self, raw: netstring.ByteSource) -> None:
        self.raw = raw

    def read(self, size: int) -> bytes:
        try:
            return self.raw.read(size)
        except (urllib3.exceptions.HTTPError, requests.RequestException) as e:
            raise NetstringIOError(f"stream read failed: {e}", e) from e


class NetstringReader(metaclass=ABCMeta):
    """A source of netstring records.

       Each subclass should:

       1. Implement ``setup`` to open a file, connect a socket, or
          whatever else is necessary before bytes can be read.

       2. Implement ``source``, returning the byte stream records are
          decoded from.

       3. Override ``close`` if the transport holds resources.
    """
    max_length: Optional[int]
    _logging_dest: Optional[TextIO]
    _peekable: Optional[PeekableSource]

    def __init__(self, *, max_length: Optional[int] = DEFAULT_MAX_LENGTH) -> None:
        """:param max_length: The largest payload length to accept, or
             ``None`` to accept any length that fits in 64 bits.
        """
        self.max_length = max_length
        self._logging_dest = None
        self._peekable = None
        self.setup()

    @abstractmethod
    def setup(self) -> None:
        """Open the underlying transport."""
        pass

    @abstractmethod
    def source(self) -> netstring.ByteSource: pass

    def close(self) -> None:
        pass

    def __enter__(self) -> NetstringReader:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def logging(self, on : bool, *, dest : TextIO = sys.stderr) -> None:
        """Whether to log received records and decoding failures."""
        if on:
            self._logging_dest = dest
        else:
            self._logging_dest = None

    def _log_rx(self, payload : bytes) -> None:
        if self._logging_dest:
            self._logging_dest.write("[RX] " + str(len(payload)) + " bytes\n")

    def _log_err(self, err : NetstringError) -> None:
        if self._logging_dest:
            self._logging_dest.write("[ERR] " + err.message + "\n")

    def get_one_record(self) -> Optional[bytes]:
        """Return the payload of the next record. Block until the record is
        complete or the stream has ended. Return None if the stream ends
        cleanly between records."""
        if self._peekable is None:
            self._peekable = PeekableSource(self.source())
        try:
            try:
                at_end = self._peekable.peek() == b''
            except OSError as e:
                raise NetstringIOError(f"stream read failed: {e}", e) from e
            if at_end:
                return None
            buf = bytearray()
            accept = netstring.accept_any if self.max_length is None else netstring.at_most(self.max_length)
            netstring.decode(self._peekable, accept, buf)
        except NetstringError as err:
            self._log_err(err)
            raise
        payload = bytes(buf)
        self._log_rx(payload)
        return payload

    def records(self) -> Iterator[bytes]:
        """Yield payloads until the stream ends cleanly."""
        while True:
            payload = self.get_one_record()
            if payload is None:
                return
            yield payload


class FileReader(NetstringReader):
    """A ``NetstringReader`` over an already open binary stream (a file,
    a pipe, ``io.BytesIO``...). The stream is not closed by the reader.
    """
    stream: IO[bytes]

    def __init__(self, stream: IO[bytes], *,
                 max_length: Optional[int] = DEFAULT_MAX_LENGTH) -> None:
        self.stream = stream
        super().__init__(max_length=max_length)

    def setup(self) -> None:
        pass

    def source(self) -> netstring.ByteSource:
        return self.stream


class SocketReader(NetstringReader):
    """A ``NetstringReader`` whose records arrive over a TCP socket
    connected to the given host and port.
    """
    socket: socket.socket
    ipv6: bool
    _file: IO[bytes]

    def __init__(self, host: str, port: int, *, ipv6: bool = True,
                 max_length: Optional[int] = DEFAULT_MAX_LENGTH) -> None:
        """
           :param host: The hostname to connect to (e.g. ``"localhost"``)
           :param port: The port on which to connect
           :param ipv6: Whether to use IPv6 (``False`` for IPv4)
        """
        self.host = host
        self.port = port
        self.ipv6 = ipv6
        super().__init__(max_length=max_length)

    def setup(self) -> None:
        self.socket = socket.socket(socket.AF_INET6 if self.ipv6 else socket.AF_INET, socket.SOCK_STREAM)
        try:
            self.socket.connect((self.host, self.port))
        except OSError:
            self.socket.close()
            raise
        self._file = self.socket.makefile('rb')

    def source(self) -> netstring.ByteSource:
        return self._file

    def close(self) -> None:
        self._file.close()
        self.socket.close()


class HttpReader(NetstringReader):
    """A ``NetstringReader`` over the body of an HTTP response, streamed
    as it arrives rather than loaded whole.
    """
    response: requests.Response
    verify: Union[bool, str]

    def __init__(self, url: str, *, verify : Union[bool, str] = True,
                 max_length: Optional[int] = DEFAULT_MAX_LENGTH) -> None:
        """
           :param url: The URL to fetch records from (e.g. ``"http://localhost:8080/records"``).
           :param verify: Determines whether a secure connection should verify the SSL certificates.
                          Corresponds to the ``verify`` keyword parameter on ``requests.get``.
        """
        self.url = url
        self.verify = verify
        super().__init__(max_length=max_length)

    def setup(self) -> None:
        self.response = requests.get(self.url,
                                     headers={'Accept': 'application/octet-stream'},
                                     stream=True,
                                     verify=self.verify)
        self.response.raise_for_status()
        self.response.raw.decode_content = True

    def source(self) -> netstring.ByteSource:
        return HttpBodySource(self.response.raw)

    def close(self) -> None:
        self.response.close()
