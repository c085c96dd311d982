"""Thread-safe in-memory metrics for served connections."""

from __future__ import annotations

import threading
from collections import Counter

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2000, 5000)


class MetricsRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_responses = 0
        self._connections_opened = 0
        self._connections_closed = 0
        self._status_counts: Counter[str] = Counter()
        self._latency_buckets: Counter[str] = Counter()
        self._bytes_received_total = 0
        self._bytes_sent_total = 0
        self._accept_errors_by_type: Counter[str] = Counter()
        self._read_errors_by_type: Counter[str] = Counter()
        self._write_errors_by_type: Counter[str] = Counter()
        self._empty_reads = 0

    def connection_opened(self) -> None:
        with self._lock:
            self._connections_opened += 1

    def connection_closed(self) -> None:
        with self._lock:
            self._connections_closed += 1

    def record_response(
        self,
        status_code: int,
        duration_ms: float,
        *,
        bytes_in: int,
        bytes_sent: int,
    ) -> None:
        with self._lock:
            self._total_responses += 1
            self._status_counts[str(status_code)] += 1
            self._bytes_received_total += bytes_in
            self._bytes_sent_total += bytes_sent
            self._latency_buckets[self._bucket_label(duration_ms)] += 1

    def record_empty_read(self) -> None:
        with self._lock:
            self._empty_reads += 1

    def record_accept_error(self, error_type: str) -> None:
        with self._lock:
            self._accept_errors_by_type[error_type] += 1

    def record_read_error(self, error_type: str) -> None:
        with self._lock:
            self._read_errors_by_type[error_type] += 1

    def record_write_error(self, error_type: str) -> None:
        with self._lock:
            self._write_errors_by_type[error_type] += 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "total_responses": self._total_responses,
                "connections_opened": self._connections_opened,
                "connections_closed": self._connections_closed,
                "open_connections": self._connections_opened - self._connections_closed,
                "status_counts": dict(self._status_counts),
                "latency_buckets_ms": dict(self._latency_buckets),
                "bytes_received_total": self._bytes_received_total,
                "bytes_sent_total": self._bytes_sent_total,
                "empty_reads": self._empty_reads,
                "accept_errors_by_type": dict(self._accept_errors_by_type),
                "read_errors_by_type": dict(self._read_errors_by_type),
                "write_errors_by_type": dict(self._write_errors_by_type),
            }

    def _bucket_label(self, duration_ms: float) -> str:
        for limit in LATENCY_BUCKETS_MS:
            if duration_ms <= limit:
                return f"<= {limit}ms"
        return "> 5000ms"
