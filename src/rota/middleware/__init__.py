"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware is code that runs between the router finding a route and the
route's terminal handler. Every stage has the (request, proceed) shape and
may pass through, wrap the response, or short-circuit.

=============================================================================
AVAILABLE MIDDLEWARE
=============================================================================

LoggingMiddleware:
    Access log with timing and a per-request id header.

ErrorHandlerMiddleware:
    Turns exceptions from later stages into 500 responses. Nothing else
    in the chain catches exceptions.

CORSMiddleware:
    CORS response headers and preflight answers.

=============================================================================
"""

from .base import Middleware, MiddlewareChain, Proceed, Stage
from .logging import LoggingMiddleware
from .errors import ErrorHandlerMiddleware
from .cors import CORSMiddleware, CORSConfig

__all__ = [
    # Base classes and chain executor
    "Middleware",
    "MiddlewareChain",
    "Proceed",
    "Stage",

    # Built-in middleware
    "LoggingMiddleware",
    "ErrorHandlerMiddleware",
    "CORSMiddleware",
    "CORSConfig",
]
