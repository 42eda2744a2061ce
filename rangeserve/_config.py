import os
from typing import TypedDict


class Config(TypedDict, total=False):
    # bytes read per chunk when streaming files
    # override default value with the environment variable RANGESERVE_RENDER_CHUNK_SIZE
    render_chunk_size: int
    """
    How many bytes are read at a time when streaming file content.
    """

    # override default value with the environment variable RANGESERVE_DEFAULT_CHARSET
    default_charset: str
    """
    Character set attached to text-like content types when none is given.
    """

    # override default value with the environment variable RANGESERVE_FALLBACK_CONTENT_TYPE
    fallback_content_type: str
    """
    Content-Type sent when the content cannot tell its own.
    """


def get_default_config() -> Config:
    """Get the default configuration for rangeserve."""

    RENDER_CHUNK_SIZE = int(os.getenv("RANGESERVE_RENDER_CHUNK_SIZE", "8192"))
    DEFAULT_CHARSET = os.getenv("RANGESERVE_DEFAULT_CHARSET", "UTF-8")
    FALLBACK_CONTENT_TYPE = os.getenv("RANGESERVE_FALLBACK_CONTENT_TYPE", "application/octet-stream")

    return {
        "render_chunk_size": RENDER_CHUNK_SIZE,
        "default_charset": DEFAULT_CHARSET,
        "fallback_content_type": FALLBACK_CONTENT_TYPE,
    }
