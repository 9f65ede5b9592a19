"""
=============================================================================
CORS MIDDLEWARE
=============================================================================

Adds Cross-Origin Resource Sharing headers to responses and answers
browser preflight requests directly.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         TWO CODE PATHS                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   OPTIONS + Access-Control-Request-Method   (preflight)             │
    │       → 204 with Allow-* headers, proceed() is NOT called           │
    │                                                                      │
    │   Anything else                                                      │
    │       → response = proceed(), then Allow-* headers are added        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Middleware only runs for matched routes, so preflight requests need a
route that accepts OPTIONS: register with router.any(...) or add an
explicit router.options(...) route inside the group that uses CORS.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .base import Middleware, Proceed
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, no_content


@dataclass
class CORSConfig:
    """
    CORS options. The defaults allow every origin, which suits development:

        CORSConfig(
            allow_origins=["https://myapp.com"],
            allow_credentials=True,
        )
    """

    allow_origins: List[str] = field(default_factory=lambda: ["*"])
    allow_methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization"]
    )
    expose_headers: List[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 86400  # Seconds a browser may cache a preflight answer


class CORSMiddleware(Middleware):
    """
    CORS for every route it is registered on.

        # Whole application
        router.use(CORSMiddleware())

        # Only the API
        router.group("/api", lambda api: api.use(CORSMiddleware()).get(...))
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def __call__(self, request: HTTPRequest, proceed: Proceed) -> HTTPResponse:
        origin = request.get_header("Origin")

        if request.method.upper() == "OPTIONS" and request.get_header("Access-Control-Request-Method"):
            response = no_content()
            self._add_cors_headers(response, origin)
            response.set_header("Access-Control-Max-Age", str(self.config.max_age))
            return response

        response = proceed()
        self._add_cors_headers(response, origin)
        return response

    def _allowed_origin(self, origin: str) -> Optional[str]:
        if "*" in self.config.allow_origins:
            # Browsers reject "*" together with credentials; echo instead
            if self.config.allow_credentials and origin:
                return origin
            return "*"
        if origin in self.config.allow_origins:
            return origin
        return None

    def _add_cors_headers(self, response: HTTPResponse, origin: str) -> None:
        allowed_origin = self._allowed_origin(origin)
        if allowed_origin is None:
            # Unknown origin: no CORS headers, the browser blocks the read
            return

        response.set_header("Access-Control-Allow-Origin", allowed_origin)
        response.set_header("Access-Control-Allow-Methods", ", ".join(self.config.allow_methods))
        response.set_header("Access-Control-Allow-Headers", ", ".join(self.config.allow_headers))

        if self.config.allow_credentials:
            response.set_header("Access-Control-Allow-Credentials", "true")
        if self.config.expose_headers:
            response.set_header("Access-Control-Expose-Headers", ", ".join(self.config.expose_headers))

        if allowed_origin != "*":
            vary = response.headers.get("Vary", "")
            if "Origin" not in vary:
                response.set_header("Vary", f"{vary}, Origin".lstrip(", "))
