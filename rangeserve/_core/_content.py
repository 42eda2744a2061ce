from __future__ import annotations

import hashlib
import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Union

from rangeserve._config import get_default_config
from rangeserve._core._mime import infer_mime
from rangeserve._exceptions import ContentError, RangeUnsatisfiableError
from rangeserve._utils import make_sync_iterator, to_bytes

__all__ = (
    "USE_DEFAULT",
    "BaseContent",
    "BaseRangeContent",
    "CallbackContent",
    "Content",
    "ContentMetadata",
    "EmptyContent",
    "FileContent",
    "JsonContent",
    "NotModifiedContent",
    "RangeContent",
    "StringContent",
    "ContentLike",
    "build_content_type",
    "coerce_content",
    "resolve_range",
)

logger = logging.getLogger("rangeserve.content")


class UseDefault:
    """
    Marker for arguments that should fall back to the configured default,
    for parameters where ``None`` is itself a meaningful value.
    """

    def __repr__(self) -> str:
        return "USE_DEFAULT"


USE_DEFAULT = UseDefault()

CallbackResult = Union[bytes, str, Iterable[Union[bytes, str]], None]


def build_content_type(mime: Optional[str], charset: Optional[str]) -> Optional[str]:
    """
    Build a Content-Type value, attaching the charset only to text-like types.

    Examples:
        >>> build_content_type("text/html", "UTF-8")
        'text/html; charset=UTF-8'
        >>> build_content_type("image/png", "UTF-8")
        'image/png'
        >>> build_content_type(None, "UTF-8") is None
        True
    """
    if mime is None:
        return None
    text = mime == "application/json" or mime.startswith("text/")
    if text and charset:
        return f"{mime}; charset={charset}"
    return mime


def resolve_range(start: Optional[int], end: Optional[int], size: int) -> Tuple[int, int]:
    """
    Turn a requested range into absolute, inclusive byte offsets.

    ``-n`` asks for the last n bytes and is clamped to the whole content
    when n exceeds the size.
    """
    if start is None and end is not None:
        return max(size - end, 0), size - 1
    elif start is not None and end is None:
        return start, size - 1
    elif start is not None and end is not None:
        return start, min(end, size - 1)
    raise ContentError("Invalid range: both start and end cannot be None")


class Content(ABC):
    """
    A renderable response body together with the metadata needed to
    describe it in response headers.
    """

    @abstractmethod
    def filename(self) -> Optional[str]:
        """The filename to suggest when downloading the content."""

    @abstractmethod
    def mime(self) -> Optional[str]:
        """The mime type, possibly inferred from the filename."""

    @abstractmethod
    def charset(self) -> Optional[str]: ...

    @abstractmethod
    def content_type(self) -> Optional[str]:
        """The value for a Content-Type header, including charset where applicable."""

    @abstractmethod
    def attachment(self) -> bool:
        """Whether the content should be downloaded rather than displayed inline."""

    @abstractmethod
    def etag(self) -> Optional[str]: ...

    @abstractmethod
    def last_modified(self) -> Optional[datetime]: ...

    @abstractmethod
    def size(self) -> Optional[int]:
        """Size of the body in bytes, or None when unknown."""

    @abstractmethod
    def render(self) -> Iterator[bytes]:
        """Produce the body as a sequence of byte chunks."""


class RangeContent(Content):
    """
    Content that can serve HTTP byte ranges. Its size is always known.

    Three range forms are understood:

    - ``n-k``: bytes n through k inclusive
    - ``n-``: byte n through the end
    - ``-n``: the last n bytes
    """

    @abstractmethod
    def size(self) -> int: ...

    @abstractmethod
    def verify_range(self, start: Optional[int], end: Optional[int]) -> bool:
        """
        Check whether the range can be satisfied. Never mutates the content.

        Raises:
            ContentError: if the size cannot be determined.
        """

    @abstractmethod
    def render_range(self, start: Optional[int], end: Optional[int]) -> Iterator[bytes]:
        """
        Produce exactly the bytes selected by the range.

        Raises:
            RangeUnsatisfiableError: if ``verify_range`` would return False.
            ContentError: if the content cannot be rendered.
        """


@dataclass
class ContentMetadata:
    filename: Optional[str] = None
    mime: Optional[str] = None
    charset: Optional[str] = None
    attachment: bool = False
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class BaseContent(Content):
    def __init__(
        self,
        *,
        filename: Optional[str] = None,
        mime: Optional[str] = None,
        charset: Union[str, None, UseDefault] = USE_DEFAULT,
        attachment: bool = False,
        etag: Optional[str] = None,
        last_modified: Optional[datetime] = None,
    ) -> None:
        if isinstance(charset, UseDefault):
            charset = get_default_config()["default_charset"]
        self.metadata = ContentMetadata(
            filename=filename,
            mime=mime,
            charset=charset,
            attachment=attachment,
            etag=etag,
            last_modified=last_modified,
        )

    def filename(self) -> Optional[str]:
        return self.metadata.filename

    def mime(self) -> Optional[str]:
        return self.metadata.mime or infer_mime(self.filename())

    def charset(self) -> Optional[str]:
        return self.metadata.charset

    def content_type(self) -> Optional[str]:
        return build_content_type(self.mime(), self.charset())

    def attachment(self) -> bool:
        return self.metadata.attachment

    def etag(self) -> Optional[str]:
        return self.metadata.etag

    def last_modified(self) -> Optional[datetime]:
        return self.metadata.last_modified

    def size(self) -> Optional[int]:
        return None

    def set_attachment(self, attachment: bool) -> "BaseContent":
        self.metadata.attachment = attachment
        return self

    def set_filename(self, filename: Optional[str]) -> "BaseContent":
        self.metadata.filename = filename
        return self


class BaseRangeContent(BaseContent, RangeContent):
    """
    Shared range validation for range-capable content.

    Subclasses only provide ``size()`` and ``_iter_range()``, which
    receives offsets that have already been validated and resolved.
    """

    def verify_range(self, start: Optional[int], end: Optional[int]) -> bool:
        # one has to be provided
        if start is None and end is None:
            return False
        size = self.size()
        if size == 0:
            return False
        if start is None:
            # "-n" form, if n is larger than the content the whole content is served
            return end > 0  # type: ignore[operator]
        elif end is None:
            # "n-" form
            return 0 <= start < size
        else:
            # "n-k" form
            return start >= 0 and end >= start and end < size

    def render_range(self, start: Optional[int], end: Optional[int]) -> Iterator[bytes]:
        if not self.verify_range(start, end):
            size = self.size()
            logger.debug("Rejected range %s-%s for content of size %d", start, end, size)
            raise RangeUnsatisfiableError(f"Invalid range: {start}-{end} for content of size {size}", size)
        start_byte, end_byte = resolve_range(start, end, self.size())
        return self._iter_range(start_byte, end_byte)

    @abstractmethod
    def _iter_range(self, start_byte: int, end_byte: int) -> Iterator[bytes]: ...


class StringContent(BaseRangeContent):
    """
    Content held in memory.

    Text is encoded with the content's charset, so sizes and ranges are
    always measured in bytes.
    """

    def __init__(self, content: Union[bytes, str], *, filename: Optional[str] = "page.html", **kwargs: Any) -> None:
        super().__init__(filename=filename, **kwargs)
        self._content = content
        self._hash: Optional[str] = None

    @property
    def content(self) -> Union[bytes, str]:
        return self._content

    def body(self) -> bytes:
        return to_bytes(self._content, self.charset() or "utf-8")

    def size(self) -> int:
        return len(self.body())

    def etag(self) -> Optional[str]:
        if self.metadata.etag:
            return self.metadata.etag
        if self._hash is None:
            self._hash = hashlib.md5(self.body(), usedforsecurity=False).hexdigest()
        return self._hash

    def render(self) -> Iterator[bytes]:
        return make_sync_iterator([self.body()])

    def _iter_range(self, start_byte: int, end_byte: int) -> Iterator[bytes]:
        return make_sync_iterator([self.body()[start_byte : end_byte + 1]])


class FileContent(BaseRangeContent):
    """
    Content streamed from a file on disk.

    The size is read from the filesystem on every call. The hash used as
    ETag is computed once per instance; call :meth:`invalidate_etag` if
    the file is known to have changed.

    Args:
        source_file: Path of the file to serve.
        filename: Download name, defaults to the file's basename.
        chunk_size: Bytes read at a time while streaming. More is faster
            but uses more memory. Defaults to the configured
            ``render_chunk_size``.
    """

    def __init__(
        self,
        source_file: Union[str, "os.PathLike[str]"],
        filename: Optional[str] = None,
        *,
        chunk_size: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        self.source_file = os.fspath(source_file)
        if not os.path.exists(self.source_file):
            raise ContentError(f"File does not exist: {self.source_file}")
        super().__init__(filename=filename, **kwargs)
        self.render_chunk_size = chunk_size if chunk_size is not None else get_default_config()["render_chunk_size"]
        if self.render_chunk_size <= 0:
            raise ValueError("chunk_size must be a positive integer")
        self._file_hash: Optional[str] = None

    def filename(self) -> Optional[str]:
        return self.metadata.filename or os.path.basename(self.source_file)

    def size(self) -> int:
        try:
            return os.path.getsize(self.source_file)
        except OSError as exc:
            raise ContentError(f"Failed to get file size for: {self.source_file}") from exc

    def etag(self) -> Optional[str]:
        if self.metadata.etag:
            return self.metadata.etag
        if self._file_hash is None:
            hasher = hashlib.md5(usedforsecurity=False)
            try:
                with open(self.source_file, "rb") as f:
                    for chunk in iter(lambda: f.read(self.render_chunk_size), b""):
                        hasher.update(chunk)
            except OSError as exc:
                raise ContentError(f"Failed to compute file hash for ETag: {self.source_file}") from exc
            self._file_hash = hasher.hexdigest()
        return self._file_hash

    def invalidate_etag(self) -> None:
        self._file_hash = None

    def render(self) -> Iterator[bytes]:
        try:
            with open(self.source_file, "rb") as f:
                for chunk in iter(lambda: f.read(self.render_chunk_size), b""):
                    yield chunk
        except OSError as exc:
            raise ContentError(f"Failed to read file: {self.source_file}") from exc

    def _iter_range(self, start_byte: int, end_byte: int) -> Iterator[bytes]:
        try:
            f = open(self.source_file, "rb")
        except OSError as exc:
            raise ContentError(f"Failed to open file for reading: {self.source_file}") from exc
        with f:
            try:
                f.seek(start_byte)
            except OSError as exc:
                raise ContentError(f"Failed to seek to offset {start_byte} of file: {self.source_file}") from exc

            remaining = end_byte - start_byte + 1
            while remaining > 0:
                try:
                    chunk = f.read(min(self.render_chunk_size, remaining))
                except OSError as exc:
                    raise ContentError(f"Failed to read file: {self.source_file}") from exc
                if not chunk:
                    # file shrank underneath us
                    break
                remaining -= len(chunk)
                yield chunk


class CallbackContent(BaseContent):
    """
    Content produced by calling a function at render time.

    The callback may return bytes, text, an iterable of either, or None.
    """

    def __init__(self, callback: Callable[[], CallbackResult], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.callback = callback

    def render(self) -> Iterator[bytes]:
        encoding = self.charset() or "utf-8"
        result = self.callback()
        if result is None:
            return
        if isinstance(result, (bytes, str)):
            yield to_bytes(result, encoding)
            return
        for chunk in result:
            yield to_bytes(chunk, encoding)


class JsonContent(BaseContent):
    def __init__(self, data: Any, **kwargs: Any) -> None:
        kwargs.setdefault("mime", "application/json")
        kwargs.setdefault("filename", "data.json")
        super().__init__(**kwargs)
        self.data = data

    def render(self) -> Iterator[bytes]:
        try:
            encoded = json.dumps(self.data, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise ContentError(f"Failed to encode JSON content: {exc}") from exc
        yield encoded.encode("utf-8")


class EmptyContent(Content):
    """Content with no body at all. Has a size of zero and renders nothing."""

    def filename(self) -> Optional[str]:
        return "empty.txt"

    def mime(self) -> Optional[str]:
        return "text/plain"

    def charset(self) -> Optional[str]:
        return None

    def content_type(self) -> Optional[str]:
        return "text/plain"

    def attachment(self) -> bool:
        return False

    def etag(self) -> Optional[str]:
        return None

    def last_modified(self) -> Optional[datetime]:
        return None

    def size(self) -> int:
        return 0

    def render(self) -> Iterator[bytes]:
        return iter(())


class NotModifiedContent(Content):
    """
    Keeps the metadata of another content but discards its body.

    Used for ``304 Not Modified`` responses, which describe the
    representation without sending it.
    """

    def __init__(self, existing_content: Content) -> None:
        self.metadata = ContentMetadata(
            filename=existing_content.filename(),
            mime=existing_content.mime(),
            charset=existing_content.charset(),
            attachment=existing_content.attachment(),
            etag=existing_content.etag(),
            last_modified=existing_content.last_modified(),
        )
        self._content_type = existing_content.content_type()
        self._size = existing_content.size()

    def filename(self) -> Optional[str]:
        return self.metadata.filename

    def mime(self) -> Optional[str]:
        return self.metadata.mime

    def charset(self) -> Optional[str]:
        return self.metadata.charset

    def content_type(self) -> Optional[str]:
        return self._content_type

    def attachment(self) -> bool:
        return self.metadata.attachment

    def etag(self) -> Optional[str]:
        return self.metadata.etag

    def last_modified(self) -> Optional[datetime]:
        return self.metadata.last_modified

    def size(self) -> Optional[int]:
        return self._size

    def render(self) -> Iterator[bytes]:
        return iter(())


ContentLike = Union[Content, str, bytes, dict, list, None]


def coerce_content(value: ContentLike) -> Content:
    """
    Turn a loosely typed body into a :class:`Content`.

    Text and bytes are served from memory, dicts and lists as JSON, and
    None as an empty body.
    """
    if isinstance(value, Content):
        return value
    if isinstance(value, (str, bytes)):
        return StringContent(value)
    if isinstance(value, (dict, list)):
        return JsonContent(value)
    if value is None:
        return EmptyContent()
    raise TypeError(f"Cannot use {type(value).__name__} as response content")
