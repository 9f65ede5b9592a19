"""
=============================================================================
ACCESS-LOG MIDDLEWARE
=============================================================================

Times every request that passes through it and writes one access-log line
per response. Register it first so its timing covers the whole chain and
it also sees requests rejected by later middleware:

    router.use(LoggingMiddleware())      # index 0: outermost
    router.use(RequireToken(...))        # may short-circuit, still logged

=============================================================================
REQUEST IDS
=============================================================================

Each request gets a short random id that is written to the log entry and
returned to the client in a response header (X-Request-ID by default):

    Client ──► GET /users/42 ──► LoggingMiddleware ──► handler
                                      │
                       log: [a1b2c3d4] "GET /users/42" 200 0.41ms
                                      │
    Client ◄── X-Request-ID: a1b2c3d4 ◄┘

A user reporting a problem can quote the id, and all log lines for that
request can be found by it.

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass, asdict
from typing import List, Optional

from .base import Middleware, Proceed
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# Named logger so applications can route access logs separately:
#   logging.getLogger("rota.access").addHandler(file_handler)
logger = logging.getLogger("rota.access")


@dataclass
class RequestLog:
    """One structured access-log entry."""

    request_id: str
    method: str
    path: str
    params: dict
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["status_code"] = int(self.status_code)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Combined-log style line, readable by the usual log tools."""
        return (
            f'{self.client_ip or "-"} - [{self.request_id}] [{self.timestamp}] '
            f'"{self.method} {self.path}" {int(self.status_code)} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

        # Text format
        router.use(LoggingMiddleware())

        # JSON for log aggregators
        router.use(LoggingMiddleware(log_format="json"))

        # Skip noisy health probes
        router.use(LoggingMiddleware(skip_paths=["/health"]))

    Exceptions from downstream stages are logged with their duration and
    re-raised unchanged.
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[List[str]] = None,
        request_id_header: str = "X-Request-ID",
    ):
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])
        self.request_id_header = request_id_header

    def __call__(self, request: HTTPRequest, proceed: Proceed) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        try:
            response = proceed()
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        if self.include_request_id:
            response.set_header(self.request_id_header, request_id)

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            params=dict(request.params),
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=response.status,
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return response
