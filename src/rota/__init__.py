"""
=============================================================================
ROTA - ROUTE MATCHING AND MIDDLEWARE DISPATCH
=============================================================================

A request-dispatch library: it matches (method, path) against registered
route templates, extracts path parameters, and runs an ordered chain of
middleware and a terminal handler to produce a response. Accepting
connections and writing responses is left to a separate transport.

=============================================================================
QUICK START
=============================================================================

    from rota import Router, HTTPRequest, ok
    from rota.middleware import LoggingMiddleware

    router = Router()
    router.use(LoggingMiddleware())

    router.get("/users/:id", lambda request, proceed: ok({"id": request.params["id"]}))
    router.get("/files/*path", lambda request, proceed: ok(request.params["path"]))

    router.group("/api", lambda api: api.get("/ping", lambda r, p: ok("pong")))

    router.resources("posts", {
        "index": lambda request: ok({"posts": []}),
        "show": lambda request: ok({"id": request.params["id"]}),
    })

    response = router.dispatch(HTTPRequest(method="GET", path="/users/42"))
    # response.status == 200, body == b'{"id":"42"}'

    transport_handler = router.as_handler()   # one-argument callable

=============================================================================
PACKAGE LAYOUT
=============================================================================

    rota/
    ├── http/
    │   ├── pattern.py      template → anchored regex + parameter names
    │   ├── router.py       route registry, groups, dispatch
    │   ├── resources.py    REST route generation from a controller
    │   ├── request.py      request descriptor
    │   ├── response.py     response value and helpers
    │   └── status_codes.py HTTPStatus
    ├── middleware/
    │   ├── base.py         continuation-passing chain executor
    │   ├── logging.py      access log
    │   ├── errors.py       exception → 500 conversion
    │   └── cors.py         CORS headers
    ├── config.py           RouterConfig, logging setup
    ├── errors.py           RouteRegistrationError
    └── __main__.py         command-line route inspection and dispatch

=============================================================================
"""

__version__ = "0.1.0"
VERSION = __version__

# http must be imported before middleware: the router pulls in the chain
# executor, which needs the request/response types already loaded.
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    ResponseBuilder,
    Router,
    Route,
    RouteMatch,
    Controller,
    compile_pattern,
    ok,
    text,
    json_response,
    created,
    no_content,
    unauthorized,
    forbidden,
    not_found,
    internal_error,
)
from .middleware import Middleware, MiddlewareChain
from .config import RouterConfig
from .errors import RotaError, RouteRegistrationError

__all__ = [
    "Router",
    "Route",
    "RouteMatch",
    "Controller",
    "compile_pattern",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseBuilder",
    "ok",
    "text",
    "json_response",
    "created",
    "no_content",
    "unauthorized",
    "forbidden",
    "not_found",
    "internal_error",
    "Middleware",
    "MiddlewareChain",
    "RouterConfig",
    "RotaError",
    "RouteRegistrationError",
    "__version__",
]
