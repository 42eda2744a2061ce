from __future__ import annotations

import os
from typing import Dict, Optional

__all__ = ("MIME_TYPES", "infer_mime")

# Best-effort mapping of file extensions to mime types.
MIME_TYPES: Dict[str, str] = {
    # Web core
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "json": "application/json",
    "map": "application/json",
    "xml": "application/xml",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "ico": "image/x-icon",
    # Audio/video
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "ogv": "video/ogg",
    "mov": "video/quicktime",
    # Documents and archives
    "txt": "text/plain",
    "pdf": "application/pdf",
    "zip": "application/zip",
    "gz": "application/x-gzip",
    "tgz": "application/x-gzip",
    "rar": "application/x-rar-compressed",
    "7z": "application/x-7z-compressed",
    "csv": "text/csv",
    "rtf": "application/rtf",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "eot": "application/vnd.ms-fontobject",
    # OpenDocument
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "odg": "application/vnd.oasis.opendocument.graphics",
    "odf": "application/vnd.oasis.opendocument.formula",
    # Microsoft Office
    "doc": "application/msword",
    "dot": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlt": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pps": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


def infer_mime(filename: Optional[str]) -> Optional[str]:
    """
    Infer a mime type from a filename's extension.

    Returns None when there is no filename or the extension is unknown.

    Examples:
        >>> infer_mime("index.HTML")
        'text/html'
        >>> infer_mime("archive.tar.gz")
        'application/x-gzip'
        >>> infer_mime("README") is None
        True
    """
    if filename is None:
        return None
    extension = os.path.splitext(str(filename))[1].lstrip(".").lower()
    return MIME_TYPES.get(extension)
