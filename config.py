"""Configuration constants for the static content server."""

HOST: str = "0.0.0.0"
PORT: int = 8080
LISTEN_BACKLOG: int = 8
# One recv() per connection; longer requests are truncated, not reassembled.
RECV_BUFFER_SIZE: int = 4096
CONTENT_ROOT: str = "."
DEFAULT_DOCUMENT: str = "backend/index.html"
LOG_FORMAT: str = "plain"
# Accept wakes up this often to notice stop(); not a client timeout.
ACCEPT_POLL_SECS: float = 0.2
