from __future__ import annotations

from typing import Any

import httpx
import pytest
from inline_snapshot import snapshot

from rangeserve import FileContent, Response, StringContent
from rangeserve.asgi import ASGIResponse, _ASGIScope


# Helper function to create ASGI scope
def create_asgi_scope(
    method: str = "GET",
    path: str = "/",
    headers: list[tuple[bytes, bytes]] | None = None,
) -> _ASGIScope:
    """Create a basic ASGI HTTP scope dictionary."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "https",
        "path": path,
        "query_string": b"",
        "root_path": "",
        "headers": headers or [],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 8000),
        "state": {},
        "extensions": {},
    }


async def simple_receive() -> dict[str, Any]:
    return {"type": "http.disconnect"}


class ResponseCollector:
    """Collect response data from ASGI send calls."""

    def __init__(self) -> None:
        self.status: int = 0
        self.headers: list[tuple[bytes, bytes]] = []
        self.messages: list[dict[str, Any]] = []

    async def send(self, message: dict[str, Any]) -> None:
        self.messages.append(message)
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = message.get("headers", [])

    def get_body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")

    def get_header(self, name: bytes) -> bytes | None:
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return None


@pytest.mark.anyio
async def test_full_response() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content=StringContent("Hello, World!", etag="v1")))

    await app(create_asgi_scope(), simple_receive, collector.send)

    assert collector.status == 200
    assert collector.headers == snapshot(
        [
            (b"accept-ranges", b"bytes"),
            (b"cache-control", b"no-store, max-age=0"),
            (b"content-disposition", b'inline; filename="page.html"'),
            (b"content-length", b"13"),
            (b"content-type", b"text/html; charset=UTF-8"),
            (b"etag", b'"v1"'),
        ]
    )
    assert collector.get_body() == b"Hello, World!"
    assert collector.messages[-1] == {"type": "http.response.body", "body": b"", "more_body": False}


@pytest.mark.anyio
async def test_range_request() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content="0123456789"))

    await app(create_asgi_scope(headers=[(b"range", b"bytes=2-5")]), simple_receive, collector.send)

    assert collector.status == 206
    assert collector.get_header(b"content-range") == b"bytes 2-5/10"
    assert collector.get_header(b"content-length") == b"4"
    assert collector.get_body() == b"2345"


@pytest.mark.anyio
async def test_unsatisfiable_range_request() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content="0123456789"))

    await app(create_asgi_scope(headers=[(b"range", b"bytes=20-25")]), simple_receive, collector.send)

    assert collector.status == 416
    assert collector.get_header(b"content-range") == b"bytes */10"
    assert collector.get_body() == b""


@pytest.mark.anyio
async def test_range_requests_can_be_disabled() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content="0123456789"), range_requests=False)

    await app(create_asgi_scope(headers=[(b"range", b"bytes=2-5")]), simple_receive, collector.send)

    assert collector.status == 200
    assert collector.get_body() == b"0123456789"


@pytest.mark.anyio
async def test_range_ignored_for_non_ok_status() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(404, content="Not found"))

    await app(create_asgi_scope(headers=[(b"range", b"bytes=0-2")]), simple_receive, collector.send)

    assert collector.status == 404
    assert collector.get_body() == b"Not found"


@pytest.mark.anyio
async def test_head_request() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content="Hello, World!"))

    await app(create_asgi_scope(method="HEAD"), simple_receive, collector.send)

    assert collector.status == 200
    assert collector.get_header(b"content-length") == b"13"
    assert collector.get_body() == b""


@pytest.mark.anyio
async def test_non_http_scope_is_ignored() -> None:
    collector = ResponseCollector()
    app = ASGIResponse(Response(content="Hello"))

    await app({"type": "lifespan"}, simple_receive, collector.send)

    assert collector.messages == []


@pytest.mark.anyio
async def test_file_is_streamed(make_file: Any) -> None:
    data = bytes(range(256)) * 10
    collector = ResponseCollector()
    app = ASGIResponse(Response(content=FileContent(make_file(data, "blob.bin"), chunk_size=512)))

    await app(create_asgi_scope(), simple_receive, collector.send)

    body_messages = [m for m in collector.messages if m["type"] == "http.response.body"]
    assert len(body_messages) == 6
    assert all(m["more_body"] for m in body_messages[:-1])
    assert collector.get_body() == data
    assert collector.get_header(b"content-type") == b"application/octet-stream"


@pytest.mark.anyio
async def test_send_errors_are_logged_and_raised(caplog: pytest.LogCaptureFixture) -> None:
    async def broken_send(message: dict[str, Any]) -> None:
        raise RuntimeError("connection lost")

    app = ASGIResponse(Response(content="Hello"))

    with caplog.at_level("ERROR", logger="rangeserve"):
        with pytest.raises(RuntimeError, match="connection lost"):
            await app(create_asgi_scope(), simple_receive, broken_send)

    assert caplog.messages == snapshot(["Error sending response: status=200 error=connection lost"])


@pytest.mark.anyio
async def test_logging(caplog: pytest.LogCaptureFixture) -> None:
    app = ASGIResponse(Response(content=StringContent("0123456789", etag="v1")))

    with caplog.at_level("DEBUG", logger="rangeserve"):
        await app(create_asgi_scope(headers=[(b"range", b"bytes=-3")]), simple_receive, ResponseCollector().send)

    assert caplog.messages == snapshot(
        [
            "Applying Range header: bytes=-3",
            "Applied range None-3 to StringContent",
            "Forcing status 206 for applied range content",
            "Built 7 headers for status 206 Partial Content",
            "Headers prepared: status=206 Partial Content headers_count=7",
            "Headers sent: status=206 Partial Content",
            "Body sent: bytes=3",
            "Response complete: status=206 Partial Content total_bytes=3",
        ]
    )


@pytest.mark.anyio
async def test_with_httpx_client() -> None:
    async def app(scope: Any, receive: Any, send: Any) -> None:
        response = Response(content=StringContent("0123456789", filename="digits.txt")).cache_public_content()
        await ASGIResponse(response)(scope, receive, send)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        full = await client.get("/")
        partial = await client.get("/", headers={"Range": "bytes=5-"})
        head = await client.head("/")

    assert full.status_code == 200
    assert full.content == b"0123456789"
    assert full.headers["content-type"] == "text/plain; charset=UTF-8"
    assert full.headers["cache-control"].startswith("public, max-age=300")

    assert partial.status_code == 206
    assert partial.headers["content-range"] == "bytes 5-9/10"
    assert partial.content == b"56789"

    assert head.status_code == 200
    assert head.headers["content-length"] == "10"
    assert head.content == b""


class TrackedContent(StringContent):
    """Renders two chunks and records whether the body iterator was closed."""

    def __init__(self) -> None:
        super().__init__("firstsecond")
        self.closed = False

    def render(self):  # type: ignore[no-untyped-def]
        try:
            yield b"first"
            yield b"second"
        finally:
            self.closed = True


@pytest.mark.anyio
async def test_body_is_closed_when_send_fails() -> None:
    async def send_headers_only(message: dict[str, Any]) -> None:
        if message["type"] == "http.response.body":
            raise RuntimeError("connection lost")

    content = TrackedContent()
    app = ASGIResponse(Response(content=content), range_requests=False)

    with pytest.raises(RuntimeError, match="connection lost"):
        await app(create_asgi_scope(), simple_receive, send_headers_only)

    assert content.closed is True
