"""Path resolution and content-type helpers shared across server modules."""

from config import DEFAULT_DOCUMENT

DEFAULT_DOCUMENT_PATHS = ("/", "/index.html")
FALLBACK_CONTENT_TYPE = "text/plain"

# Checked in order; the first matching suffix wins.
CONTENT_TYPES: tuple[tuple[str, str], ...] = (
    (".html", "text/html; charset=UTF-8"),
    (".js", "application/javascript"),
    (".css", "text/css"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
)


def resolve_resource(requested_path: str, default_document: str = DEFAULT_DOCUMENT) -> str:
    """Map a request path to a file path relative to the content root.

    Paths are not normalized: ``..`` segments and extra slashes pass through
    unchanged, so a request can name files outside the content root.
    """
    if requested_path in DEFAULT_DOCUMENT_PATHS:
        return default_document
    return requested_path.removeprefix("/")


def get_content_type(file_path: str) -> str:
    for suffix, content_type in CONTENT_TYPES:
        if file_path.endswith(suffix):
            return content_type
    return FALLBACK_CONTENT_TYPE
