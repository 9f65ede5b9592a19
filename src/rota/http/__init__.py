"""
=============================================================================
ROUTING AND REQUEST/RESPONSE TYPES
=============================================================================

Everything a transport needs to hand requests to the router and get
responses back, plus the routing machinery itself.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REGISTRATION vs DISPATCH                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   REGISTRATION (startup)              DISPATCH (per request)         │
    │                                                                      │
    │   compile_pattern(template)           router.match(method, path)     │
    │        │                                   │                         │
    │        ▼                                   ▼                         │
    │   Route(method, path,                 request.params = match.params  │
    │         pattern, handlers)                 │                         │
    │        │                                   ▼                         │
    │        ▼                              MiddlewareChain(...).run()     │
    │   router._routes.append(route)             │                         │
    │                                            ▼                         │
    │   (group / resources feed add())      HTTPResponse                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest
from .response import (
    HTTPResponse,
    ResponseBuilder,
    # Convenience functions for common responses
    ok,              # 200 OK
    text,            # any status, text/plain
    json_response,   # any status, application/json
    created,         # 201 Created
    no_content,      # 204 No Content
    unauthorized,    # 401 Unauthorized
    forbidden,       # 403 Forbidden
    not_found,       # 404, the fixed dispatch miss
    internal_error,  # 500 Internal Server Error
    default_response,
)
from .status_codes import HTTPStatus
from .pattern import CompiledPattern, compile_pattern
from .resources import Controller, RESOURCE_ACTIONS
from .router import Router, Route, RouteMatch, METHODS, ANY

__all__ = [
    # Request / response
    "HTTPRequest",
    "HTTPResponse",
    "ResponseBuilder",
    "HTTPStatus",

    # Response convenience functions
    "ok",
    "text",
    "json_response",
    "created",
    "no_content",
    "unauthorized",
    "forbidden",
    "not_found",
    "internal_error",
    "default_response",

    # Routing
    "Router",
    "Route",
    "RouteMatch",
    "METHODS",
    "ANY",
    "CompiledPattern",
    "compile_pattern",
    "Controller",
    "RESOURCE_ACTIONS",
]
