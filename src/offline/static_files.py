"""Safe web-root file resolution and content-type helpers for the static origin."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

INDEX_FILE = "index.html"

_TEXT_LIKE_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/manifest+json",
        "application/xml",
        "image/svg+xml",
    }
)
_EXTRA_TYPES = {
    ".webmanifest": "application/manifest+json",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".svg": "image/svg+xml",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
}


def resolve_static_file(web_root: Path, relative_path: str) -> Optional[Path]:
    """Resolve a path below `web_root`, mapping directories to their index file.

    Returns None for anything outside the root or for missing files.
    """
    root = web_root.resolve()
    relative = relative_path.lstrip("/")
    candidate = (root / relative).resolve() if relative else root

    if candidate != root and root not in candidate.parents:
        return None

    if candidate.is_dir():
        candidate = candidate / INDEX_FILE

    if not candidate.is_file():
        return None

    return candidate


def guess_content_type(path: Path) -> str:
    """Guess an HTTP content type and append UTF-8 charset for text payloads."""
    mime_type = _EXTRA_TYPES.get(path.suffix.lower())
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_LIKE_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type
