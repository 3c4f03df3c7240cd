"""Path, encoding and identifier helpers shared by upload workflows."""
from __future__ import annotations

import mimetypes
import posixpath
from typing import Optional
from urllib.parse import quote

import nanoid

DEFAULT_MIMETYPE = "application/octet-stream"
ASSET_ID_SIZE = 10

# Characters encodeURIComponent leaves untouched besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"

_FALLBACK_MIMES = {
    ".json": "application/json",
    ".md": "text/markdown",
    ".srt": "text/plain",
    ".webp": "image/webp",
    ".woff2": "font/woff2",
    ".yaml": "application/yaml",
    ".yml": "application/yaml",
}


def join_posix(*parts: str) -> str:
    """
    Join path segments with "/" and normalize the result.

    Empty segments are ignored and an absolute later segment does not discard
    earlier ones. Returns "." when nothing is left.
    """
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."
    return posixpath.normpath(joined)


def strip_leading_slash(path: str) -> str:
    """Remove a single leading slash."""
    return path[1:] if path.startswith("/") else path


def folder_key(relative_path: str) -> str:
    """Parent directory of a relative path ("." for top-level files)."""
    return posixpath.dirname(relative_path) or "."


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way encodeURIComponent does (slashes included)."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def guess_mimetype(filename: str) -> Optional[str]:
    mimetype, _ = mimetypes.guess_type(filename, strict=False)
    if mimetype:
        return mimetype
    return _FALLBACK_MIMES.get(posixpath.splitext(filename)[1].lower())


def resolve_mimetype(filename: str, declared: Optional[str] = None) -> str:
    """Declared mimetype, else inferred from extension, else generic binary."""
    return declared or guess_mimetype(filename) or DEFAULT_MIMETYPE


def generate_asset_id(size: int = ASSET_ID_SIZE) -> str:
    """Random URL-safe identifier for assets the backend did not key."""
    return nanoid.generate(size=size)
