"""
=============================================================================
ERROR-HANDLING MIDDLEWARE
=============================================================================

The chain executor never catches exceptions: a handler that raises makes
dispatch() raise. Applications that want a 500 response instead place
this middleware early in the chain:

    router.use(LoggingMiddleware())        # still sees the 500
    router.use(ErrorHandlerMiddleware())   # converts exceptions below it
    router.get("/boom", broken_handler)

Stages registered before it are outside its reach, which is the point:
the access log above it records the converted 500 like any other response.

=============================================================================
"""

import logging

from .base import Middleware, Proceed
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, internal_error


logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(Middleware):
    """
    Convert exceptions raised further down the chain into 500 responses.

    Args:
        expose_details: Put the exception type and message in the response
                        body. Useful in development, leaks internals in
                        production.
    """

    def __init__(self, expose_details: bool = False):
        self.expose_details = expose_details

    def __call__(self, request: HTTPRequest, proceed: Proceed) -> HTTPResponse:
        try:
            return proceed()
        except Exception as e:
            logger.exception(f"Unhandled error in {request.method} {request.path}")
            if self.expose_details:
                return internal_error(f"{type(e).__name__}: {e}")
            return internal_error()
