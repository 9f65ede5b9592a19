"""
=============================================================================
RESOURCE ROUTES
=============================================================================

router.resources("posts", controller) registers the conventional REST
routes for every action the controller exposes:

    ┌──────────┬────────┬──────────────────┐
    │ Action   │ Method │ Path             │
    ├──────────┼────────┼──────────────────┤
    │ index    │ GET    │ /posts           │
    │ new      │ GET    │ /posts/new       │
    │ create   │ POST   │ /posts           │
    │ show     │ GET    │ /posts/:id       │
    │ edit     │ GET    │ /posts/:id/edit  │
    │ update   │ PUT    │ /posts/:id       │
    │ destroy  │ DELETE │ /posts/:id       │
    └──────────┴────────┴──────────────────┘

Rows are registered in this order, which is also their match priority:
"/posts/new" is added before "/posts/:id", so GET /posts/new reaches the
new action rather than show with id == "new".

A controller is any "capability bag":
- a mapping of action name → callable, or
- an object whose actions are attributes (bound methods, functions)

Lists, tuples, sets, strings and numbers are rejected at registration.

Missing actions are skipped. Each action is called with the request
(or with no arguments if it takes none) and must return a response.

=============================================================================
"""

from collections.abc import Mapping, Sequence, Set
from typing import Any, Callable, List, Optional, Tuple
import inspect
import logging

from ..errors import RouteRegistrationError
from .request import HTTPRequest
from .response import HTTPResponse


logger = logging.getLogger(__name__)


# (action, method, path suffix) in registration order
RESOURCE_ACTIONS: Tuple[Tuple[str, str, str], ...] = (
    ("index", "GET", ""),
    ("new", "GET", "/new"),
    ("create", "POST", ""),
    ("show", "GET", "/:id"),
    ("edit", "GET", "/:id/edit"),
    ("update", "PUT", "/:id"),
    ("destroy", "DELETE", "/:id"),
)


class Controller:
    """
    Optional base class documenting the seven resource actions.

    Subclasses define only the actions they support; the attributes below
    are None so an undefined action is skipped by router.resources():

        class PostsController(Controller):
            def index(self, request):
                return ok({"posts": []})

            def show(self, request):
                return ok({"id": request.params["id"]})
    """

    index: Optional[Callable[..., HTTPResponse]] = None
    new: Optional[Callable[..., HTTPResponse]] = None
    create: Optional[Callable[..., HTTPResponse]] = None
    show: Optional[Callable[..., HTTPResponse]] = None
    edit: Optional[Callable[..., HTTPResponse]] = None
    update: Optional[Callable[..., HTTPResponse]] = None
    destroy: Optional[Callable[..., HTTPResponse]] = None


def _is_capability_bag(controller: Any) -> bool:
    """A Mapping, or an object that is not a scalar or a plain collection."""
    if isinstance(controller, Mapping):
        return True
    # Sequences expose a callable index(), which is not an action
    if controller is None or isinstance(controller, (str, bytes, bytearray, int, float, Sequence, Set)):
        return False
    return True


def _lookup(controller: Any, action: str) -> Any:
    if isinstance(controller, Mapping):
        return controller.get(action)
    return getattr(controller, action, None)


def _accepts_request(action: Callable[..., Any]) -> bool:
    """True if action can be called with one positional argument."""
    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures get the request
        return True

    for parameter in signature.parameters.values():
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


def action_handler(action_name: str, action: Callable[..., HTTPResponse]) -> Callable:
    """
    Adapt a controller action to the (request, proceed) stage shape.

    The action is the terminal stage, so proceed is never called.
    """
    if _accepts_request(action):
        def handler(request: HTTPRequest, proceed) -> HTTPResponse:
            return action(request)
    else:
        def handler(request: HTTPRequest, proceed) -> HTTPResponse:
            return action()

    handler.__name__ = action_name
    handler.__qualname__ = getattr(action, "__qualname__", action_name)
    return handler


def resource_routes(name: str, controller: Any) -> List[Tuple[str, str, Callable]]:
    """
    Work out the (method, path, handler) triples for a resource.

    Everything is validated before anything is returned, so callers can
    register the result without risking a partial resource.

    Raises:
        RouteRegistrationError: name is not a string, controller is not a
            capability bag, or an exposed action is not callable
    """
    if not isinstance(name, str):
        raise RouteRegistrationError(
            f"Resource name must be a string, got {type(name).__name__}",
            argument="name",
        )

    if not _is_capability_bag(controller):
        raise RouteRegistrationError(
            f"Controller must be a mapping or an object exposing actions, "
            f"got {type(controller).__name__}",
            argument="controller",
        )

    base_path = "/" + name
    routes = []

    for action_name, method, suffix in RESOURCE_ACTIONS:
        action = _lookup(controller, action_name)
        if action is None:
            continue
        if not callable(action):
            raise RouteRegistrationError(
                f"Controller action '{action_name}' of resource '{name}' must be callable",
                argument=action_name,
            )
        routes.append((method, base_path + suffix, action_handler(action_name, action)))

    logger.debug(f"Resource '{name}' exposes {len(routes)} action(s)")
    return routes
