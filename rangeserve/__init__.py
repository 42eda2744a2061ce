from rangeserve._core import (
    ABSENT as ABSENT,
    AppliedRange as AppliedRange,
    BaseContent as BaseContent,
    BaseRangeContent as BaseRangeContent,
    BodySent as BodySent,
    CacheControl as CacheControl,
    CallbackContent as CallbackContent,
    Complete as Complete,
    Content as Content,
    ContentMetadata as ContentMetadata,
    EmptyContent as EmptyContent,
    FileContent as FileContent,
    Headers as Headers,
    HeadersPrepared as HeadersPrepared,
    HeadersSent as HeadersSent,
    Initial as Initial,
    JsonContent as JsonContent,
    NotModifiedContent as NotModifiedContent,
    Range as Range,
    RangeContent as RangeContent,
    RenderOptions as RenderOptions,
    RenderState as RenderState,
    Response as Response,
    Status as Status,
    StringContent as StringContent,
    build_headers as build_headers,
)
from rangeserve._exceptions import (
    ContentError as ContentError,
    RangeUnsatisfiableError as RangeUnsatisfiableError,
    ResponseError as ResponseError,
)
from rangeserve._renderer import Renderer as Renderer
from rangeserve._sinks import BaseSink as BaseSink, BufferSink as BufferSink, StreamSink as StreamSink

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
    ## Models
    "Response",
    "Status",
    "CacheControl",
    ## Headers
    "ABSENT",
    "Headers",
    "Range",
    "build_headers",
    ## Rendering
    "Renderer",
    "RenderOptions",
    "RenderState",
    "Initial",
    "HeadersPrepared",
    "HeadersSent",
    "BodySent",
    "Complete",
    ## Sinks
    "BaseSink",
    "BufferSink",
    "StreamSink",
    ## Errors
    "ResponseError",
    "ContentError",
    "RangeUnsatisfiableError",
)
