from __future__ import annotations

import typing as tp
from abc import ABC, abstractmethod

from rangeserve._core._headers import Headers
from rangeserve._core.models import Status
from rangeserve._utils import HEADERS_ENCODING

__all__ = ("BaseSink", "BufferSink", "StreamSink")


class BaseSink(ABC):
    """Destination for a rendered response."""

    @abstractmethod
    def start(self, status: Status, headers: Headers) -> None:
        """Emit the status line and headers. Called exactly once, before any body."""

    @abstractmethod
    def write(self, chunk: bytes) -> None: ...

    def finish(self) -> None:
        pass


class BufferSink(BaseSink):
    """Collects a rendered response in memory."""

    def __init__(self) -> None:
        self.status: tp.Optional[Status] = None
        self.headers: tp.Optional[Headers] = None
        self.chunks: tp.List[bytes] = []
        self.finished = False

    def start(self, status: Status, headers: Headers) -> None:
        self.status = status
        self.headers = headers

    def write(self, chunk: bytes) -> None:
        self.chunks.append(chunk)

    def finish(self) -> None:
        self.finished = True

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)


class StreamSink(BaseSink):
    """
    Writes an HTTP/1.1 message to a binary stream, such as a socket file.

    Example:
        ```python
        with conn.makefile("wb") as stream:
            Renderer().render(response, StreamSink(stream))
        ```
    """

    def __init__(self, stream: tp.BinaryIO, http_version: str = "HTTP/1.1") -> None:
        self.stream = stream
        self.http_version = http_version

    def start(self, status: Status, headers: Headers) -> None:
        lines = [f"{self.http_version} {status.code} {status.reason_phrase}"]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        self.stream.write(("\r\n".join(lines) + "\r\n\r\n").encode(HEADERS_ENCODING))

    def write(self, chunk: bytes) -> None:
        self.stream.write(chunk)

    def finish(self) -> None:
        self.stream.flush()
