"""HTTP response model and serializer."""

from dataclasses import dataclass

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    404: "Not Found",
}

NOT_FOUND_BODY = b"404 Not Found"


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    content_type: str = "text/plain"
    body: bytes | str = b""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def reason_phrase(self) -> str:
        return REASON_PHRASES.get(self.status_code, "Unknown")

    def head_bytes(self) -> bytes:
        header_lines = [
            f"HTTP/1.1 {self.status_code} {self.reason_phrase}",
            f"Content-Type: {self.content_type}",
            f"Content-Length: {len(self.body)}",
            "Connection: close",
        ]
        return "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes."""
        return self.head_bytes() + self.body


def not_found() -> HTTPResponse:
    return HTTPResponse(status_code=404, content_type="text/plain", body=NOT_FOUND_BODY)
