"""
=============================================================================
ROUTER EXCEPTIONS
=============================================================================

Only registration can fail loudly. Dispatch treats "no route matched" as a
normal outcome (a 404 response), and exceptions raised by handlers or
middleware are never wrapped: they travel up to whoever called dispatch().

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       WHERE ERRORS SURFACE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   REGISTRATION TIME                 DISPATCH TIME                    │
    │   router.get("/x", "oops")          router.dispatch(request)         │
    │        │                                 │                           │
    │        ▼                                 ├── no match → 404 response │
    │   RouteRegistrationError                 │                           │
    │   (raised at the call,                   └── handler raises →        │
    │    route table untouched)                    exception propagates    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""


class RotaError(Exception):
    """Base class for all errors raised by the router."""


class RouteRegistrationError(RotaError, TypeError):
    """
    Raised when a route, middleware, group or resource is registered wrongly.

    These are programmer errors: a handler that is not callable, a route
    with no handler at all, a group prefix that is not a string, and so on.
    The offending call aborts before anything is added to the router, so a
    caught RouteRegistrationError never leaves a half-registered route behind.

    Subclasses TypeError so callers that already guard against bad argument
    types keep working.
    """

    def __init__(self, message: str, argument: str = ""):
        super().__init__(message)
        self.argument = argument  # Name of the offending argument, if known
