"""
=============================================================================
ROUTER
=============================================================================

Registers route templates and dispatches requests through the middleware
chain of the first matching route.

- Static paths: /users, /api/health
- Dynamic parameters: /users/:id, /posts/:post_id/comments/:comment_id
- Wildcard paths: /static/*filepath
- Method-based routing: GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS, or
  any method ("*")

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        DISPATCH FLOW                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /users/123                                                     │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER (scanned in registration order)                     │   │
    │   │                                                              │   │
    │   │  ┌────────────────────────────────────────────────────────┐ │   │
    │   │  │ GET  /health       → health                            │ │   │
    │   │  │ GET  /users        → list_users                        │ │   │
    │   │  │ GET  /users/:id    → auth, get_user   ← FIRST MATCH    │ │   │
    │   │  │ *    /users/*rest  → fallback           (never reached)│ │   │
    │   │  └────────────────────────────────────────────────────────┘ │   │
    │   │                                                              │   │
    │   │  request.params = {"id": "123"}                              │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   MiddlewareChain([*global_middleware, auth, get_user]).run(request) │
    │        │                                                             │
    │        ▼                                                             │
    │   HTTPResponse → back to the transport                              │
    │                                                                      │
    │   No match at all → fixed 404 "Not Found" response, not an error    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REGISTRATION API
=============================================================================

Every registration method returns the router, so calls chain:

    router = (Router()
        .use(LoggingMiddleware())
        .get("/users", list_users)
        .get("/users/:id", require_auth, get_user)
        .group("/api", lambda api: api.use(cors).get("/ping", ping))
        .resources("posts", PostsController()))

The decorator form registers the decorated function as the terminal
handler and returns it unchanged:

    @router.route("GET", "/hello/:name")
    def hello(request, proceed):
        return text(f"Hello, {request.params['name']}!")

=============================================================================
INTERVIEW QUESTIONS ABOUT ROUTING
=============================================================================

Q: "How do you handle route conflicts?"
A: "First registered wins, always. There is no specificity ranking, so
   /users/me has to be registered before /users/:id. That keeps matching
   predictable: reading the registration code tells you the priority."

Q: "What's the time complexity of route matching?"
A: "O(R × P): R routes, each a regex fullmatch over the path. A radix
   tree would be faster but could not honour pure registration order as
   simply."

Q: "How do groups work without a parent pointer?"
A: "The group builder fills a throwaway Router. Afterwards its routes are
   re-added to the parent with the prefix prepended to the template and
   the throwaway router's middleware prepended to the handler list."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
import logging

from ..config import RouterConfig
from ..errors import RouteRegistrationError
from ..middleware.base import MiddlewareChain, Stage, stage_name
from ..middleware.logging import LoggingMiddleware
from .pattern import CompiledPattern, compile_pattern
from .request import HTTPRequest
from .resources import resource_routes
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)


# =============================================================================
# METHOD TOKENS
# =============================================================================

METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
ANY = "*"


def _method_token(method: Any) -> str:
    """Normalise a registration method to its token, or raise."""
    if not isinstance(method, str):
        raise RouteRegistrationError(
            f"HTTP method must be a string, got {type(method).__name__}",
            argument="method",
        )

    token = method.upper()
    if token == "ANY":
        token = ANY
    if token != ANY and token not in METHODS:
        raise RouteRegistrationError(
            f"Unknown HTTP method: {method!r}. Use one of {', '.join(METHODS)} or '*'.",
            argument="method",
        )
    return token


def _check_handlers(handlers: Tuple[Any, ...]) -> None:
    if not handlers:
        raise RouteRegistrationError("Route must have at least one handler", argument="handlers")

    for position, handler in enumerate(handlers, start=1):
        if not callable(handler):
            raise RouteRegistrationError(
                f"Handler {position} must be callable, got {type(handler).__name__}",
                argument="handlers",
            )


@dataclass(frozen=True)
class Route:
    """
    A registered route. Immutable once created.

        Route(
            method="GET",
            path="/users/:id",                  # template as registered
            pattern=<CompiledPattern>,          # anchored matcher
            handlers=(require_auth, get_user),  # middleware..., terminal
        )
    """

    method: str
    path: str
    pattern: CompiledPattern = field(repr=False)
    handlers: Tuple[Stage, ...] = field(repr=False)

    @property
    def param_names(self) -> Tuple[str, ...]:
        return self.pattern.param_names

    def accepts(self, method: str) -> bool:
        return self.method == ANY or self.method == method


@dataclass
class RouteMatch:
    """
    Result of a successful match.

    params is a fresh dict; an exact static route yields {} here, which is
    still a match (no match at all is None).
    """

    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered route registry with global middleware.

    Registration is expected to finish before the first dispatch. Once
    serving, treat the router as read-only shared state: it has no locking,
    and dispatch only reads it.
    """

    def __init__(self, config: Optional[RouterConfig] = None):
        self.config = config or RouterConfig()
        self._routes: List[Route] = []        # Registration order = priority
        self._middleware: List[Stage] = []    # Runs before every route

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add(self, method: str, path: str, *handlers: Stage) -> "Router":
        """
        Register a route.

        Args:
            method: HTTP method, or "*" / "ANY" for every method
            path: Route template (e.g. /users/:id)
            *handlers: Route-local middleware followed by the terminal
                       handler, all with the (request, proceed) signature

        Returns:
            Self for method chaining

        Raises:
            RouteRegistrationError: Unknown method, non-string path, no
                handler, or a non-callable handler. Nothing is registered.
        """
        token = _method_token(method)
        _check_handlers(handlers)
        pattern = compile_pattern(path)

        route = Route(
            method=token,
            path=path,
            pattern=pattern,
            handlers=tuple(handlers),
        )
        self._routes.append(route)

        logger.debug(f"Added route {token} {path} ({len(handlers)} handler(s))")
        return self

    def get(self, path: str, *handlers: Stage) -> "Router":
        """Register a GET route."""
        return self.add("GET", path, *handlers)

    def post(self, path: str, *handlers: Stage) -> "Router":
        """Register a POST route."""
        return self.add("POST", path, *handlers)

    def put(self, path: str, *handlers: Stage) -> "Router":
        """Register a PUT route."""
        return self.add("PUT", path, *handlers)

    def delete(self, path: str, *handlers: Stage) -> "Router":
        """Register a DELETE route."""
        return self.add("DELETE", path, *handlers)

    def patch(self, path: str, *handlers: Stage) -> "Router":
        """Register a PATCH route."""
        return self.add("PATCH", path, *handlers)

    def head(self, path: str, *handlers: Stage) -> "Router":
        """Register a HEAD route."""
        return self.add("HEAD", path, *handlers)

    def options(self, path: str, *handlers: Stage) -> "Router":
        """Register an OPTIONS route."""
        return self.add("OPTIONS", path, *handlers)

    def any(self, path: str, *handlers: Stage) -> "Router":
        """Register a route that matches every HTTP method."""
        return self.add(ANY, path, *handlers)

    def route(self, method: str, path: str, *middleware: Stage) -> Callable[[Stage], Stage]:
        """
        Decorator form of add().

        The decorated function becomes the terminal handler, after any
        route-local middleware given here:

            @router.route("DELETE", "/users/:id", require_admin)
            def delete_user(request, proceed):
                return no_content()
        """
        def decorator(handler: Stage) -> Stage:
            self.add(method, path, *middleware, handler)
            return handler  # Unchanged, so decorators can stack
        return decorator

    def use(self, middleware: Stage, *more: Stage) -> "Router":
        """
        Append global middleware.

        Global middleware runs before the handlers of every route on this
        router, in the order added. Inside a group builder it is local to
        the group's routes.
        """
        added = (middleware,) + more
        for position, item in enumerate(added, start=1):
            if not callable(item):
                raise RouteRegistrationError(
                    f"Middleware {position} must be callable, got {type(item).__name__}",
                    argument="middleware",
                )

        for item in added:
            self._middleware.append(item)
            logger.debug(f"Added middleware: {stage_name(item)}")
        return self

    # =========================================================================
    # ROUTER COMPOSITION
    # =========================================================================

    def group(self, prefix: str, builder: Callable[["Router"], Any]) -> "Router":
        """
        Register a batch of routes under a common prefix.

            router.group("/api", lambda api: (
                api.use(require_token)
                   .get("/users", list_users)
                   .group("/v1", lambda v1: v1.get("/ping", ping))
            ))

            → GET /api/users      stages: require_token, list_users
            → GET /api/v1/ping    stages: require_token, ping

        The builder receives a fresh, empty Router. When it returns, each of
        its routes is added here with path prefix + route.path (plain string
        concatenation, no slash fixing) and with the builder router's
        middleware in front of the route's own handlers. Middleware used in
        a group never runs for routes outside it.

        If the builder raises, the exception propagates and nothing is added.
        """
        if not isinstance(prefix, str):
            raise RouteRegistrationError(
                f"Group prefix must be a string, got {type(prefix).__name__}",
                argument="prefix",
            )
        if not callable(builder):
            raise RouteRegistrationError(
                f"Group builder must be callable, got {type(builder).__name__}",
                argument="builder",
            )

        scope = Router(self.config)
        builder(scope)

        for route in scope._routes:
            self.add(route.method, prefix + route.path, *scope._middleware, *route.handlers)

        logger.debug(f"Group {prefix!r} contributed {len(scope._routes)} route(s)")
        return self

    def resources(self, name: str, controller: Any) -> "Router":
        """
        Register the REST routes for a resource.

            router.resources("posts", {"index": list_posts, "show": show_post})

            → GET /posts       → list_posts(request)
            → GET /posts/:id   → show_post(request)

        Only actions the controller exposes are registered; see
        rota.http.resources for the full table.
        """
        for method, path, handler in resource_routes(name, controller):
            self.add(method, path, handler)
        return self

    # =========================================================================
    # ROUTE MATCHING AND DISPATCH
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Routes are tried in registration order and the scan stops at the
        first hit; no "most specific" selection happens.

        The method is upper-cased before comparison, as at registration, so
        match("get", ...) finds a GET route.

        Returns:
            RouteMatch if found, None otherwise
        """
        method = method.upper()

        for route in self._routes:
            if not route.accepts(method):
                continue

            params = route.pattern.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)

        return None

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and run its middleware chain.

        1. Find the first matching route (none → fixed 404 response)
        2. Replace request.params with the route's parameters
        3. Run global middleware followed by the route's handlers

        Exceptions raised by stages are not caught here; put an
        ErrorHandlerMiddleware first in the chain to turn them into 500s.
        """
        found = self.match(request.method, request.path)

        if found is None:
            logger.debug(f"No route matches {request.method} {request.path}")
            return not_found()

        request.params = found.params

        chain = MiddlewareChain([*self._middleware, *found.route.handlers])
        return chain.run(request)

    def as_handler(self) -> Callable[[HTTPRequest], HTTPResponse]:
        """
        A one-argument callable for handing the router to a transport.

            server = SomeServer(handler=router.as_handler())
        """
        def handler(request: HTTPRequest) -> HTTPResponse:
            return self.dispatch(request)
        return handler

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.dispatch(request)

    def access_logger(self) -> LoggingMiddleware:
        """Access-log middleware built from this router's config."""
        return LoggingMiddleware(
            log_format=self.config.log_format,
            request_id_header=self.config.request_id_header,
            skip_paths=list(self.config.skip_paths),
        )

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    @property
    def routes(self) -> Tuple[Route, ...]:
        """Registered routes, in match order."""
        return tuple(self._routes)

    @property
    def middleware(self) -> Tuple[Stage, ...]:
        """Global middleware, in execution order."""
        return tuple(self._middleware)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def format_routes(self) -> str:
        """
        Route table as text.

            Registered Routes:
            ------------------------------------------------------------
              GET      /users/:id    require_auth → get_user
              ANY      /*            not_found_page
            ------------------------------------------------------------
        """
        lines = ["Registered Routes:", "-" * 60]
        for route in self._routes:
            method = "ANY" if route.method == ANY else route.method
            stages = " → ".join(stage_name(h) for h in route.handlers)
            lines.append(f"  {method:8} {route.path:24} {stages}")
        lines.append("-" * 60)
        if self._middleware:
            names = ", ".join(stage_name(m) for m in self._middleware)
            lines.append(f"Global middleware: {names}")
        return "\n".join(lines)

    def print_routes(self) -> None:
        """Print the route table (useful for debugging)."""
        print("\n" + self.format_routes())
