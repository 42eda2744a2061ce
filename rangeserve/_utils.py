from __future__ import annotations

import typing as tp
from datetime import datetime, timezone
from email.utils import formatdate
from typing import Iterable, Iterator

from rangeserve._exceptions import ContentError

HEADERS_ENCODING = "iso-8859-1"


def make_sync_iterator(iterable: Iterable[bytes]) -> Iterator[bytes]:
    for item in iterable:
        yield item


def close_iterator(iterator: Iterator[bytes]) -> None:
    close = getattr(iterator, "close", None)
    if close is not None:
        close()


def to_bytes(value: tp.Union[bytes, str], encoding: str = "utf-8") -> bytes:
    """
    Encode text with the given charset; bytes pass through untouched.

    Raises:
        ContentError: if the charset is unknown or cannot represent the text.
    """
    if isinstance(value, bytes):
        return value
    try:
        return value.encode(encoding)
    except (UnicodeEncodeError, LookupError) as exc:
        raise ContentError(f"Failed to encode content as {encoding}: {exc}") from exc


def format_http_date(value: datetime) -> str:
    """
    Format a timestamp as an HTTP-date (RFC 7231 IMF-fixdate), always in GMT.

    Naive datetimes are taken to be in UTC.

    Examples:
        >>> format_http_date(datetime(2024, 1, 1, 12, 30, 45, tzinfo=timezone.utc))
        'Mon, 01 Jan 2024 12:30:45 GMT'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return formatdate(timeval=value.timestamp(), localtime=False, usegmt=True)
