"""Unit tests for HTTP response serialization."""

from response import HTTPResponse, not_found


def test_response_serialization_sets_fixed_headers_in_order() -> None:
    response = HTTPResponse(status_code=200, content_type="text/css", body="p{}")

    raw = response.to_bytes()

    assert raw == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/css\r\n"
        b"Content-Length: 3\r\n"
        b"Connection: close\r\n"
        b"\r\n"
        b"p{}"
    )


def test_content_length_counts_bytes_not_characters() -> None:
    response = HTTPResponse(status_code=200, content_type="text/html; charset=UTF-8", body="héllo")

    raw = response.to_bytes()

    assert b"Content-Length: 6\r\n" in raw
    assert raw.endswith("héllo".encode("utf-8"))


def test_binary_body_is_sent_verbatim() -> None:
    body = bytes(range(256))
    response = HTTPResponse(status_code=200, content_type="image/png", body=body)

    raw = response.to_bytes()

    assert raw.endswith(b"\r\n\r\n" + body)
    assert b"Content-Length: 256\r\n" in raw


def test_not_found_response_is_exact() -> None:
    assert not_found().to_bytes() == (
        b"HTTP/1.1 404 Not Found\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 13\r\n"
        b"Connection: close\r\n"
        b"\r\n"
        b"404 Not Found"
    )


def test_empty_body_has_zero_length() -> None:
    raw = HTTPResponse(status_code=200).to_bytes()

    assert raw.endswith(b"Content-Length: 0\r\nConnection: close\r\n\r\n")
