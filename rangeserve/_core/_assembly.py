from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Dict, Optional
from urllib.parse import quote

from rangeserve._config import get_default_config
from rangeserve._core._content import Content, RangeContent, coerce_content
from rangeserve._core._headers import ABSENT, HeaderValue, Headers, http_quote
from rangeserve._core._range import AppliedRange
from rangeserve._utils import format_http_date

if TYPE_CHECKING:
    from rangeserve._core.models import Response

__all__ = (
    "build_headers",
    "content_disposition_header",
    "etag_header",
    "last_modified_header",
    "prepare_response",
)

logger = logging.getLogger("rangeserve.renderer")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_\- .]")


def prepare_response(response: Response) -> None:
    """
    Finalise status and content before headers are built.

    Raw statuses and bodies assigned after construction are coerced the
    same way the constructor does. Serving an applied range always means
    ``206 Partial Content``.
    """
    response.set_status(response.status).set_content(response.content)
    if isinstance(response.content, AppliedRange):
        logger.debug("Forcing status 206 for applied range content")
        response.set_status(206)


def content_disposition_header(content: Content) -> str:
    """
    Build a Content-Disposition value.

    The plain ``filename`` parameter only carries a safe ASCII rendition;
    when that differs from the real name, the real name is also sent
    percent-encoded as ``filename*`` (RFC 5987).

    Examples:
        >>> from rangeserve import StringContent
        >>> content_disposition_header(StringContent("x", filename="report.pdf"))
        'inline; filename="report.pdf"'
        >>> content_disposition_header(StringContent("x", filename="résumé.pdf").set_attachment(True))
        'attachment; filename="r_sum_.pdf"; filename*=UTF-8\\'\\'r%C3%A9sum%C3%A9.pdf'
    """
    value = "attachment" if content.attachment() else "inline"
    filename = content.filename()
    if filename is None:
        return value
    filename = str(filename)
    ascii_filename = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    value += f"; filename={http_quote(ascii_filename)}"
    if ascii_filename != filename:
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


def last_modified_header(content: Content) -> Optional[str]:
    last_modified = content.last_modified()
    return format_http_date(last_modified) if last_modified else None


def etag_header(content: Content) -> Optional[str]:
    etag = content.etag()
    return http_quote(str(etag)) if etag else None


def build_headers(response: Response, fallback_content_type: Optional[str] = None) -> Headers:
    """
    Assemble the complete header set for a response.

    Headers derived from the content come first; user-supplied headers on
    the response are merged over them. A user header set to ``ABSENT``
    removes the header entirely, and headers without a value are never
    emitted.
    """
    content = coerce_content(response.content)
    if fallback_content_type is None:
        fallback_content_type = get_default_config()["fallback_content_type"]

    built: Dict[str, Optional[HeaderValue]] = {}
    built["Content-Disposition"] = content_disposition_header(content)
    built["Content-Type"] = content.content_type() or fallback_content_type
    if response.cache is not None:
        built["Cache-Control"] = str(response.cache)
    built["Last-Modified"] = last_modified_header(content)
    built["ETag"] = etag_header(content)
    if isinstance(content, RangeContent):
        built["Accept-Ranges"] = "bytes"

    if isinstance(content, AppliedRange):
        built["Content-Range"] = content.content_range_header()
        built["Content-Length"] = str(content.actual_size())
        built["Accept-Ranges"] = "bytes"
    else:
        size = content.size()
        if size is not None:
            built["Content-Length"] = str(size)

    merged = Headers()
    for name, value in built.items():
        if value is not None:
            merged[name] = value
    for name, value in response.headers.items():
        merged[name] = value

    headers = Headers({name: value for name, value in merged.items() if value is not ABSENT and value != ""})
    logger.debug("Built %d headers for status %s", len(headers), response.status)
    return headers
