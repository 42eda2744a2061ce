from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Optional, Union

from rangeserve._core._cache_control import CacheControl
from rangeserve._core._content import (
    ContentLike,
    EmptyContent,
    FileContent,
    JsonContent,
    NotModifiedContent,
    RangeContent,
    coerce_content,
)
from rangeserve._core._headers import Headers, Range
from rangeserve._core._range import AppliedRange
from rangeserve._exceptions import RangeUnsatisfiableError, ResponseError

__all__ = ("Status", "Response", "coerce_status")

logger = logging.getLogger("rangeserve.response")


@dataclass(frozen=True)
class Status:
    """
    HTTP status code and reason phrase.

    The reason phrase defaults to the standard one for the code.
    """

    code: int
    reason_phrase: str = ""

    def __post_init__(self) -> None:
        try:
            phrase = HTTPStatus(self.code).phrase
        except ValueError:
            raise ResponseError(f"Invalid status code: {self.code}") from None
        if not self.reason_phrase:
            object.__setattr__(self, "reason_phrase", phrase)

    def __str__(self) -> str:
        return f"{self.code} {self.reason_phrase}"


def coerce_status(value: Union[Status, int]) -> Status:
    return value if isinstance(value, Status) else Status(value)


@dataclass
class Response:
    """
    An HTTP response waiting to be rendered.

    ``status`` accepts an int or a :class:`Status`; ``content`` accepts any
    :class:`Content`, ``str``/``bytes`` (served from memory), ``dict``/``list``
    (served as JSON) or ``None`` (empty body). Responses are never cached
    unless a cache policy says otherwise.
    """

    status: Union[Status, int] = 200
    content: ContentLike = None
    headers: Headers = field(default_factory=Headers)
    cache: Optional[CacheControl] = field(default_factory=CacheControl.never_cached)

    def __post_init__(self) -> None:
        self.set_status(self.status)
        self.set_content(self.content)

    @classmethod
    def redirect(cls, url: str, permanent: bool = False, preserve_method: bool = False) -> "Response":
        if permanent:
            status_code = 308 if preserve_method else 301
        else:
            status_code = 307 if preserve_method else 302
        response = cls(status_code)
        response.headers["Location"] = str(url)
        return response

    @classmethod
    def json(cls, data: Any, status: Union[Status, int] = 200) -> "Response":
        return cls(status=status, content=JsonContent(data))

    @classmethod
    def file(cls, file_path: str, status: Union[Status, int] = 200) -> "Response":
        return cls(status=status, content=FileContent(file_path))

    def set_status(self, status: Union[Status, int]) -> "Response":
        self.status = coerce_status(status)
        return self

    def set_content(self, value: ContentLike) -> "Response":
        self.content = coerce_content(value)
        return self

    def cache_public_content(self) -> "Response":
        self.cache = CacheControl.public_content()
        return self

    def cache_public_media(self) -> "Response":
        self.cache = CacheControl.public_media()
        return self

    def cache_private_content(self) -> "Response":
        self.cache = CacheControl.private_content()
        return self

    def cache_private_media(self) -> "Response":
        self.cache = CacheControl.private_media()
        return self

    def cache_never(self) -> "Response":
        self.cache = CacheControl.never_cached()
        return self

    def apply_range(self, start: Optional[int], end: Optional[int]) -> "Response":
        """
        Serve only part of the content.

        When the range cannot be satisfied the response becomes a
        ``416 Range Not Satisfiable`` with an empty body and a
        ``Content-Range: bytes */<size>`` header.

        Raises:
            ResponseError: if the content does not support ranges.
        """
        content = self.content
        if not isinstance(content, RangeContent):
            raise ResponseError(f"{type(content).__name__} does not support range requests")
        try:
            self.content = AppliedRange(content, start, end)
        except RangeUnsatisfiableError as exc:
            logger.debug("Range %s-%s not satisfiable: %s", start, end, exc)
            self.set_status(416)
            self.content = EmptyContent()
            self.headers["Content-Range"] = exc.content_range
        return self

    def apply_range_header(self, range_header: Optional[str]) -> "Response":
        """
        Honour an inbound ``Range`` header value.

        Missing, malformed or multi-range headers, and content that cannot
        serve ranges, leave the response as a full representation.
        """
        if not range_header or not isinstance(self.content, RangeContent):
            return self
        parsed = Range.try_from_str(range_header)
        if parsed is None:
            logger.debug("Ignoring unsupported Range header: %r", range_header)
            return self
        return self.apply_range(parsed.start, parsed.end)

    def not_modified(self) -> "Response":
        """Turn the response into a ``304 Not Modified`` for the same content."""
        self.set_status(304)
        self.content = NotModifiedContent(self.content)  # type: ignore[arg-type]
        return self
