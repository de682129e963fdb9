"""SQLite request logging for API."""

import sqlite3
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import HTTPException, Request


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    started: float = field(default_factory=time.time, repr=False)
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    user_role: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    employees_checked: int | None = None
    opportunities_scanned: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)

    def finish(self, status_code: int) -> None:
        self.status_code = status_code
        self.processing_time_ms = int((time.time() - self.started) * 1000)

    def record_http_error(self, exc: HTTPException) -> None:
        """Copy status, code and details from a route HTTPException."""
        self.finish(exc.status_code)
        if isinstance(exc.detail, dict):
            self.error_code = exc.detail.get("code")
            self.error_message = exc.detail.get("error")
            for detail in exc.detail.get("details", []):
                self.details.append(("validation_error", detail))
        else:
            self.error_message = str(exc.detail)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def start_request_log(request: Request, user_role: str | None = None) -> RequestLog:
    return RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        user_role=user_role,
    )


def log_request(conn: sqlite3.Connection, log: RequestLog) -> None:
    """Write request log to SQLite database."""
    cursor = conn.cursor()

    # Insert main request record
    cursor.execute(
        """
        INSERT INTO api_requests (
            request_id, timestamp, endpoint, method, client_ip, user_role,
            status_code, error_code, error_message, processing_time_ms,
            employees_checked, opportunities_scanned
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """,
        (
            log.request_id,
            log.timestamp,
            log.endpoint,
            log.method,
            log.client_ip,
            log.user_role,
            log.status_code,
            log.error_code,
            log.error_message,
            log.processing_time_ms,
            log.employees_checked,
            log.opportunities_scanned,
        ),
    )

    # Insert detail records
    for detail_type, message in log.details:
        cursor.execute(
            """
            INSERT INTO api_request_details (request_id, detail_type, message)
            VALUES (?, ?, ?)
        """,
            (log.request_id, detail_type, message),
        )

    conn.commit()


def write_request_log(conn: sqlite3.Connection, log: RequestLog) -> None:
    """Write the log without letting a logging failure fail the request."""
    try:
        log_request(conn, log)
    except sqlite3.Error as e:
        print(f"Failed to write request log {log.request_id}: {e}")
