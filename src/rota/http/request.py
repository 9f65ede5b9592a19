"""
=============================================================================
REQUEST DESCRIPTOR
=============================================================================

The request is produced by the transport, not by the router. The router
reads exactly two fields (method and path) and writes exactly one
(params), once per dispatch, before the first middleware runs.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      WHO OWNS WHICH FIELD                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Transport fills:   method, path, headers, query_params, body,     │
    │                      client_address, context                         │
    │                                                                      │
    │   Router reads:      method, path                                    │
    │                                                                      │
    │   Router writes:     params  ← replaced (never merged) on dispatch  │
    │                                                                      │
    │   Middleware may:    read anything, stash values in context          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple


@dataclass
class HTTPRequest:
    """
    A request as seen by the router and its stages.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         HTTP method token ("GET", "POST", ...)

        path:           Request path without query string. Matched exactly
                        as given: no trailing-slash or case normalisation.

        params:         Path parameters of the matched route
                        Route "/users/:id" with "/users/42" → {"id": "42"}

        headers:        Header name → value, lower-case keys

        query_params:   Parsed query string as dict of lists
                        "?a=1&a=2" → {"a": ["1", "2"]}

        body:           Raw request body

        client_address: (ip, port) of the peer, when the transport knows it

        context:        Free-form per-request storage for the transport and
                        middleware (authenticated user, deadline, ...)

    =========================================================================
    """

    method: str
    path: str

    # Router-injected parameters
    params: Dict[str, str] = field(default_factory=dict)

    # Transport-supplied fields the router does not interpret
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def user_agent(self) -> str:
        """User-Agent header value, empty string when absent."""
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """
        Case-insensitive header lookup.

        Example:
            request.get_header("Content-Type")
        """
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or default."""
        values = self.query_params.get(name, [])
        return values[0] if values else default
