from rangeserve._core._assembly import (
    build_headers as build_headers,
    content_disposition_header as content_disposition_header,
    etag_header as etag_header,
    last_modified_header as last_modified_header,
    prepare_response as prepare_response,
)
from rangeserve._core._cache_control import CacheControl as CacheControl
from rangeserve._core._content import (
    USE_DEFAULT as USE_DEFAULT,
    BaseContent as BaseContent,
    BaseRangeContent as BaseRangeContent,
    CallbackContent as CallbackContent,
    Content as Content,
    ContentMetadata as ContentMetadata,
    EmptyContent as EmptyContent,
    FileContent as FileContent,
    JsonContent as JsonContent,
    NotModifiedContent as NotModifiedContent,
    RangeContent as RangeContent,
    StringContent as StringContent,
)
from rangeserve._core._headers import ABSENT as ABSENT, Headers as Headers, Range as Range
from rangeserve._core._range import AppliedRange as AppliedRange
from rangeserve._core._states import (
    BodySent as BodySent,
    Complete as Complete,
    HeadersPrepared as HeadersPrepared,
    HeadersSent as HeadersSent,
    Initial as Initial,
    RenderOptions as RenderOptions,
    RenderState as RenderState,
)
from rangeserve._core.models import Response as Response, Status as Status

__all__ = (
    ## Content
    "Content",
    "RangeContent",
    "ContentMetadata",
    "BaseContent",
    "BaseRangeContent",
    "StringContent",
    "FileContent",
    "CallbackContent",
    "JsonContent",
    "EmptyContent",
    "NotModifiedContent",
    "AppliedRange",
    "USE_DEFAULT",
    ## Models
    "Response",
    "Status",
    "CacheControl",
    ## Headers
    "ABSENT",
    "Headers",
    "Range",
    "build_headers",
    "prepare_response",
    "content_disposition_header",
    "etag_header",
    "last_modified_header",
    ## States
    "RenderState",
    "RenderOptions",
    "Initial",
    "HeadersPrepared",
    "HeadersSent",
    "BodySent",
    "Complete",
)
