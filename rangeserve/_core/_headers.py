from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Iterator,
    Literal,
    Mapping,
    MutableMapping,
    Optional,
    Union,
)

__all__ = (
    "ABSENT",
    "HeaderValue",
    "Headers",
    "Range",
    "http_quote",
    "normalize_header_name",
)


class _Absent(enum.Enum):
    """
    Marker for a header that was explicitly removed.

    Stored as a header value it means "do not send this header", which
    also suppresses any header the renderer would have generated itself.
    """

    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent.ABSENT

HeaderValue = Union[str, Literal[_Absent.ABSENT]]


def http_quote(value: str) -> str:
    r"""
    Wrap a value in double quotes, escaping embedded quotes and backslashes.

    Examples:
        >>> http_quote('abc')
        '"abc"'
        >>> http_quote('a"b')
        '"a\\"b"'
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def normalize_header_name(name: str) -> str:
    """
    Canonicalise a header name to Title-Case.

    Examples:
        >>> normalize_header_name("content-type")
        'Content-Type'
        >>> normalize_header_name("ETAG")
        'Etag'
    """
    return "-".join(word.capitalize() for word in name.lower().split("-"))


class Headers(MutableMapping[str, HeaderValue]):
    """
    Case-insensitive header collection.

    Names are stored in canonical Title-Case and iterated in sorted order.
    A value of :data:`ABSENT` marks the header for removal when the
    response is rendered, overriding generated headers as well. Setting a
    header to ``None`` is the same as setting it to :data:`ABSENT`.
    """

    def __init__(self, headers: Optional[Mapping[str, HeaderValue]] = None) -> None:
        self._headers: Dict[str, HeaderValue] = {}
        for key, value in (headers or {}).items():
            self[key] = value

    @staticmethod
    def normalize_header_name(name: str) -> str:
        return normalize_header_name(name)

    def __getitem__(self, key: str) -> HeaderValue:
        return self._headers[normalize_header_name(key)]

    def __setitem__(self, key: str, value: Optional[HeaderValue]) -> None:
        if value is None:
            value = ABSENT
        elif value is not ABSENT and not isinstance(value, str):
            value = str(value)
        self._headers[normalize_header_name(key)] = value

    def __delitem__(self, key: str) -> None:
        del self._headers[normalize_header_name(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_header_name(key) in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._headers))

    def __len__(self) -> int:
        return len(self._headers)

    def unset(self, key: str) -> None:
        self._headers.pop(normalize_header_name(key), None)

    def suppress(self, key: str) -> None:
        self[key] = ABSENT

    def copy(self) -> "Headers":
        return Headers(self._headers)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


@dataclass
class Range:
    unit: Literal["bytes"]
    start: int | None
    end: int | None

    @classmethod
    def try_from_str(cls, range_header: str) -> "Range" | None:
        """
        Parse a single-range ``Range`` header value.

        Returns None for anything that is not exactly one ``bytes`` range,
        so callers can fall back to serving the full representation.

        Examples:
            >>> Range.try_from_str("bytes=0-99")
            Range(unit='bytes', start=0, end=99)
            >>> Range.try_from_str("bytes=-500")
            Range(unit='bytes', start=None, end=500)
            >>> Range.try_from_str("bytes=0-1,5-6") is None
            True
        """
        if "=" not in range_header:
            return None
        unit, values = range_header.split("=", 1)
        if unit.strip().lower() != "bytes":
            return None

        parts = [p.strip() for p in values.split(",")]
        if len(parts) != 1:
            # we don't support multiple ranges
            return None

        part = parts[0]
        if "-" not in part:
            return None
        start_str, end_str = (s.strip() for s in part.split("-", 1))
        if not start_str and not end_str:
            return None
        if (start_str and not start_str.isdigit()) or (end_str and not end_str.isdigit()):
            return None

        return cls(
            unit="bytes",
            start=int(start_str) if start_str else None,
            end=int(end_str) if end_str else None,
        )
