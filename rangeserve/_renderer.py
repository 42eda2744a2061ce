from __future__ import annotations

import logging
from typing import Optional

from rangeserve._core._assembly import build_headers, prepare_response
from rangeserve._core._headers import Headers
from rangeserve._core._states import Complete, Initial, RenderOptions
from rangeserve._core.models import Response
from rangeserve._sinks import BaseSink
from rangeserve._utils import close_iterator

__all__ = ("Renderer",)

logger = logging.getLogger("rangeserve.renderer")


class Renderer:
    """
    Renders responses: finalises the status, assembles headers from the
    content metadata and streams the body into a sink.

    Args:
        options: Rendering options. Defaults to ``RenderOptions()``.

    Example:
        ```python
        from rangeserve import BufferSink, Renderer, Response

        sink = BufferSink()
        Renderer().render(Response(content="Hello").apply_range(0, 1), sink)
        assert sink.status.code == 206
        assert sink.body == b"He"
        ```
    """

    def __init__(self, options: Optional[RenderOptions] = None) -> None:
        self.options = options or RenderOptions()

    def prepare_response(self, response: Response) -> None:
        prepare_response(response)

    def build_headers(self, response: Response) -> Headers:
        return build_headers(response, self.options.fallback_content_type)

    def render(self, response: Response, sink: BaseSink, include_body: Optional[bool] = None) -> Complete:
        options = self.options
        if include_body is not None:
            options = RenderOptions(
                include_body=include_body,
                fallback_content_type=options.fallback_content_type,
            )

        prepared = Initial(response=response, options=options).next()
        sink.start(prepared.status, prepared.headers)
        sent = prepared.next()

        bytes_sent = 0
        body = sent.iter_body()
        try:
            for chunk in body:
                if chunk:
                    sink.write(chunk)
                    bytes_sent += len(chunk)
        finally:
            close_iterator(body)

        body_sent = sent.next(bytes_sent)
        sink.finish()
        return body_sent.next()
