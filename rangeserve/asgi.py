from __future__ import annotations

import logging
import typing as t

import anyio.to_thread

from rangeserve._core._states import Initial, RenderOptions
from rangeserve._core.models import Response, coerce_status
from rangeserve._utils import HEADERS_ENCODING, close_iterator

# Configure logger for this module
logger = logging.getLogger("rangeserve.asgi")


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]

_STOP = object()


class ASGIResponse:
    """
    ASGI application that serves a single :class:`Response`.

    For ``GET`` and ``HEAD`` requests answered with ``200``, an inbound
    ``Range`` header is honoured: satisfiable ranges are served as
    ``206 Partial Content``, unsatisfiable ones as ``416``. Reading the
    body happens in a worker thread so file I/O never blocks the event
    loop.

    Args:
        response: The response to serve.
        range_requests: Whether to honour ``Range`` headers.
        options: Rendering options. ``include_body`` is decided per
            request from the method.

    Example:
        ```python
        from rangeserve import FileContent, Response
        from rangeserve.asgi import ASGIResponse

        async def app(scope, receive, send):
            response = Response(content=FileContent("video.mp4")).cache_public_media()
            await ASGIResponse(response)(scope, receive, send)
        ```
    """

    def __init__(
        self,
        response: Response,
        range_requests: bool = True,
        options: RenderOptions | None = None,
    ) -> None:
        self.response = response
        self.range_requests = range_requests
        self.options = options or RenderOptions()

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            return

        method = scope.get("method", "GET").upper()
        response = self.response

        if self.range_requests and method in ("GET", "HEAD") and coerce_status(response.status).code == 200:
            range_header = self._get_header(scope, b"range")
            if range_header is not None:
                logger.debug("Applying Range header: %s", range_header)
                response.apply_range_header(range_header)

        options = RenderOptions(
            include_body=method != "HEAD",
            fallback_content_type=self.options.fallback_content_type,
        )
        prepared = Initial(response=response, options=options).next()

        headers: list[tuple[bytes, bytes]] = [
            (key.lower().encode(HEADERS_ENCODING), value.encode(HEADERS_ENCODING))  # type: ignore[union-attr]
            for key, value in prepared.headers.items()
        ]

        try:
            await send(
                {
                    "type": "http.response.start",
                    "status": prepared.status.code,
                    "headers": headers,
                }
            )
            sent = prepared.next()

            bytes_sent = 0
            body = sent.iter_body()
            try:
                while True:
                    chunk = await anyio.to_thread.run_sync(next, body, _STOP)
                    if chunk is _STOP:
                        break
                    if not chunk:
                        continue
                    await send({"type": "http.response.body", "body": chunk, "more_body": True})
                    bytes_sent += len(chunk)
            finally:
                close_iterator(body)

            await send({"type": "http.response.body", "body": b"", "more_body": False})
            sent.next(bytes_sent).next()
        except Exception as e:
            logger.error(
                "Error sending response: status=%d error=%s",
                prepared.status.code,
                str(e),
                exc_info=True,
            )
            raise

    @staticmethod
    def _get_header(scope: _Scope, name: bytes) -> str | None:
        for key, value in scope.get("headers", []):
            if key.lower() == name:
                return value.decode(HEADERS_ENCODING)
        return None
