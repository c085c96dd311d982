"""Static file response builder."""

import logging
from pathlib import Path

from config import CONTENT_ROOT, DEFAULT_DOCUMENT
from request import HTTPRequest
from response import HTTPResponse, not_found
from utils import get_content_type, resolve_resource

logger = logging.getLogger(__name__)


def build_response(file_path: str, content_root: str = CONTENT_ROOT) -> HTTPResponse:
    """Read ``file_path`` under ``content_root`` into a 200 response, or 404.

    Any failure to open or read the file (missing, a directory, no
    permission, a name the OS cannot represent) is answered with 404.
    """
    try:
        with (Path(content_root) / file_path).open("rb") as file_obj:
            body = file_obj.read()
    except (OSError, ValueError) as exc:
        logger.debug("Cannot open %s: %s", file_path, exc)
        return not_found()

    return HTTPResponse(
        status_code=200,
        content_type=get_content_type(file_path),
        body=body,
    )


def serve_static(
    request: HTTPRequest,
    *,
    content_root: str = CONTENT_ROOT,
    default_document: str = DEFAULT_DOCUMENT,
) -> HTTPResponse:
    file_path = resolve_resource(request.path, default_document)
    return build_response(file_path, content_root)
