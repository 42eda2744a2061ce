from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from rangeserve._core._content import Content, RangeContent
from rangeserve._exceptions import RangeUnsatisfiableError

__all__ = ("AppliedRange",)

logger = logging.getLogger("rangeserve.content")


@dataclass(frozen=True)
class AppliedRange(Content):
    """
    A satisfiable byte range applied to range-capable content.

    All metadata, including ``size()``, is passed through from the wrapped
    content; ``actual_size()`` is the length of the slice. Rendering asks
    the wrapped content for the originally requested range, so the range
    is resolved the same way it was validated.

    Byte offsets are recomputed from the wrapped content's current size on
    every call.

    Raises:
        RangeUnsatisfiableError: on construction, if the wrapped content
            rejects the range.

    Examples:
        >>> from rangeserve import StringContent
        >>> applied = AppliedRange(StringContent("0123456789"), 2, 5)
        >>> applied.content_range_header()
        'bytes 2-5/10'
        >>> applied.actual_size()
        4
    """

    content: RangeContent
    start: Optional[int]
    end: Optional[int]

    def __post_init__(self) -> None:
        if not self.content.verify_range(self.start, self.end):
            size = self.content.size()
            raise RangeUnsatisfiableError(
                f"Invalid range: {self.start}-{self.end} for content of size {size}",
                size,
            )
        logger.debug("Applied range %s-%s to %s", self.start, self.end, type(self.content).__name__)

    def filename(self) -> Optional[str]:
        return self.content.filename()

    def mime(self) -> Optional[str]:
        return self.content.mime()

    def charset(self) -> Optional[str]:
        return self.content.charset()

    def content_type(self) -> Optional[str]:
        return self.content.content_type()

    def attachment(self) -> bool:
        return self.content.attachment()

    def etag(self) -> Optional[str]:
        return self.content.etag()

    def last_modified(self) -> Optional[datetime]:
        return self.content.last_modified()

    def size(self) -> int:
        return self.content.size()

    def start_byte(self) -> int:
        if self.start is not None:
            return self.start
        elif self.end is not None:
            # last n bytes, clamped to the whole content
            return max(self.content.size() - self.end, 0)
        # unreachable once the constructor has validated the range
        raise RangeUnsatisfiableError("Both start and end are None", self.content.size())

    def end_byte(self) -> int:
        size = self.content.size()
        if self.end is None or self.start is None:
            return size - 1
        return min(self.end, size - 1)

    def actual_size(self) -> int:
        """Number of bytes ``render()`` produces."""
        return self.end_byte() - self.start_byte() + 1

    def content_range_header(self) -> str:
        return f"bytes {self.start_byte()}-{self.end_byte()}/{self.content.size()}"

    def render(self) -> Iterator[bytes]:
        return self.content.render_range(self.start, self.end)
