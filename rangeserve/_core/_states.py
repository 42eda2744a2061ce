from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from rangeserve._core._assembly import build_headers, prepare_response
from rangeserve._core._headers import Headers
from rangeserve._core.models import Response, Status, coerce_status

__all__ = (
    "BodySent",
    "Complete",
    "HeadersPrepared",
    "HeadersSent",
    "Initial",
    "RenderOptions",
    "RenderState",
)

logger = logging.getLogger("rangeserve.renderer")


@dataclass
class RenderOptions:
    """
    Options controlling how a response is turned into wire output.

    Attributes:
    ----------
    include_body : bool
        When False (e.g. answering a HEAD request), headers are emitted
        exactly as for the full response but no body bytes are produced.

    fallback_content_type : Optional[str]
        Content-Type to send when the content cannot tell its own.
        None means the configured default.
    """

    include_body: bool = True
    fallback_content_type: Optional[str] = None


@dataclass
class RenderState(ABC):
    """
    One step of rendering a response.

    Rendering moves strictly forward through
    ``Initial -> HeadersPrepared -> HeadersSent -> BodySent -> Complete``;
    each state can only produce the one that follows it.
    """

    response: Response
    options: RenderOptions = field(default_factory=RenderOptions)

    @abstractmethod
    def next(self, *args: Any, **kwargs: Any) -> Union["RenderState", None]:
        raise NotImplementedError("Subclasses must implement this method")


@dataclass
class Initial(RenderState):
    def next(self) -> "HeadersPrepared":
        prepare_response(self.response)
        headers = build_headers(self.response, self.options.fallback_content_type)
        status = coerce_status(self.response.status)
        logger.debug("Headers prepared: status=%s headers_count=%d", status, len(headers))
        return HeadersPrepared(
            response=self.response,
            options=self.options,
            status=status,
            headers=headers,
        )


@dataclass
class HeadersPrepared(RenderState):
    """
    Status and headers are final.

    ``status`` and ``headers`` are snapshots: changing the response from
    here on has no effect on what gets emitted.
    """

    status: Status = field(default_factory=lambda: Status(200))
    headers: Headers = field(default_factory=Headers)

    def next(self) -> "HeadersSent":
        logger.debug("Headers sent: status=%s", self.status)
        return HeadersSent(
            response=self.response,
            options=self.options,
            status=self.status,
            headers=self.headers,
        )


@dataclass
class HeadersSent(RenderState):
    status: Status = field(default_factory=lambda: Status(200))
    headers: Headers = field(default_factory=Headers)

    def iter_body(self) -> Iterator[bytes]:
        if not self.options.include_body:
            return iter(())
        return self.response.content.render()  # type: ignore[union-attr]

    def next(self, bytes_sent: int = 0) -> "BodySent":
        logger.debug("Body sent: bytes=%d", bytes_sent)
        return BodySent(
            response=self.response,
            options=self.options,
            status=self.status,
            bytes_sent=bytes_sent,
        )


@dataclass
class BodySent(RenderState):
    status: Status = field(default_factory=lambda: Status(200))
    bytes_sent: int = 0

    def next(self) -> "Complete":
        logger.info("Response complete: status=%s total_bytes=%d", self.status, self.bytes_sent)
        return Complete(
            response=self.response,
            options=self.options,
            status=self.status,
            bytes_sent=self.bytes_sent,
        )


@dataclass
class Complete(RenderState):
    status: Status = field(default_factory=lambda: Status(200))
    bytes_sent: int = 0

    def next(self) -> None:
        return None
