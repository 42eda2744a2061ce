from __future__ import annotations

__all__ = ("ResponseError", "ContentError", "RangeUnsatisfiableError")


class ResponseError(Exception): ...


class ContentError(ResponseError):
    """
    Raised when content metadata or the body itself cannot be produced.

    Callers are expected to answer with a 500-class response.
    """


class RangeUnsatisfiableError(ContentError):
    """
    Raised when a requested byte range cannot be served from the content.

    Callers must answer with ``416 Range Not Satisfiable`` and a
    ``Content-Range`` header built from :attr:`content_range`.
    """

    def __init__(self, message: str, size: int) -> None:
        super().__init__(message)
        self.size = size

    @property
    def content_range(self) -> str:
        return f"bytes */{self.size}"
