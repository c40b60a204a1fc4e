# static.py
import logging
from pathlib import Path

from fastapi.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".ico": "image/x-icon",
}
DEFAULT_MIME = "text/plain"

NOT_FOUND_TEXT = "File not found"
SERVER_ERROR_TEXT = "Server error"


def resolve_asset(public_dir: Path, url_path: str) -> Path | None:
    """Map a URL path onto a file under public_dir, or None if it escapes the root
    or cannot name a file at all (an embedded NUL byte)."""
    if url_path in ("", "/"):
        url_path = "/index.html"
    root = public_dir.resolve()
    try:
        target = (root / url_path.lstrip("/")).resolve()
    except ValueError:
        return None
    if target != root and root not in target.parents:
        return None
    return target


def serve_asset(public_dir: Path, url_path: str) -> Response:
    target = resolve_asset(public_dir, url_path)
    if target is None:
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)

    try:
        content = target.read_bytes()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError, ValueError):
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    except OSError:
        logger.exception("Failed to read static asset %s", target)
        return PlainTextResponse(SERVER_ERROR_TEXT, status_code=500)

    content_type = MIME_TYPES.get(target.suffix.lower(), DEFAULT_MIME)
    return Response(content=content, media_type=content_type)
