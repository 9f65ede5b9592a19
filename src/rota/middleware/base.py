"""
=============================================================================
MIDDLEWARE CHAIN EXECUTOR
=============================================================================

Runs the ordered stage list of one dispatch using continuation passing.

=============================================================================
THE STAGE CONTRACT
=============================================================================

Every stage, middleware and terminal handler alike, has the same shape:

    def stage(request: HTTPRequest, proceed: Proceed) -> HTTPResponse

Calling proceed() runs the next stage synchronously and returns its
response. A stage chooses one of three behaviours:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        STAGE BEHAVIOURS                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   PASS-THROUGH      return proceed()                                 │
    │                                                                      │
    │   WRAP              response = proceed()                             │
    │                     response.set_header("X-Time", "3ms")             │
    │                     return response                                  │
    │                                                                      │
    │   SHORT-CIRCUIT     if not authorised(request):                      │
    │                         return unauthorized()   # proceed() unused   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STAGE ORDER FOR ONE DISPATCH
=============================================================================

    global middleware (router.use, in order)
        ++ route handlers (group middleware..., route middleware..., handler)

    Index:   0          1          2            3
             ┌────────┐ ┌────────┐ ┌──────────┐ ┌─────────┐
    Stages:  │ Logger │→│  CORS  │→│ Auth(grp)│→│ Handler │→ (past end:
             └────────┘ └────────┘ └──────────┘ └─────────┘   200, empty)

    Request flows left to right; each response flows back right to left,
    so a wrapping stage sees the terminal response only after every inner
    stage has returned.

=============================================================================
INTERVIEW QUESTIONS ABOUT MIDDLEWARE CHAINS
=============================================================================

Q: "Why pass a zero-argument proceed() instead of next(request)?"
A: "The request, including its path params, is fixed before the first
   stage runs. A zero-argument continuation makes it impossible for one
   stage to hand the next stage a different request."

Q: "Recursion or a loop?"
A: "Recursion through small closures. Each stage index gets its own
   proceed, so a stage that calls proceed() twice simply re-runs the
   downstream stages. Depth equals the number of stages, which is small."

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Tuple
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, default_response


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Continuation handed to a stage: runs the rest of the chain
Proceed = Callable[[], HTTPResponse]

# A chain stage: middleware or terminal handler
Stage = Callable[[HTTPRequest, Proceed], HTTPResponse]


class Middleware(ABC):
    """
    Base class for class-based middleware.

    Plain functions with the (request, proceed) signature are equally valid
    stages; subclass this when the middleware carries configuration.

        class RequireToken(Middleware):
            def __init__(self, token):
                self.token = token

            def __call__(self, request, proceed):
                if request.get_header("Authorization") != f"Bearer {self.token}":
                    return unauthorized()
                return proceed()
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, proceed: Proceed) -> HTTPResponse:
        """Handle the request, calling proceed() to continue the chain."""

    @property
    def name(self) -> str:
        """Name used in log messages."""
        return self.__class__.__name__


def stage_name(stage: Stage) -> str:
    """Readable name for a stage, for logs and route tables."""
    if isinstance(stage, Middleware):
        return stage.name
    return getattr(stage, "__qualname__", None) or getattr(stage, "__name__", None) or repr(stage)


class MiddlewareChain:
    """
    Executes an ordered list of stages for a single request.

    The chain is built per dispatch and discarded afterwards:

        chain = MiddlewareChain([*global_middleware, *route.handlers])
        response = chain.run(request)
    """

    def __init__(self, stages: Iterable[Stage]):
        self._stages: Tuple[Stage, ...] = tuple(stages)

    def run(self, request: HTTPRequest) -> HTTPResponse:
        """Run the chain from the first stage and return its response."""
        return self._invoke(request, 0)

    def _invoke(self, request: HTTPRequest, index: int) -> HTTPResponse:
        if index >= len(self._stages):
            logger.debug(f"Chain ran past its last stage for {request.method} {request.path}")
            return default_response()

        stage = self._stages[index]

        def proceed() -> HTTPResponse:
            return self._invoke(request, index + 1)

        return stage(request, proceed)

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self):
        return iter(self._stages)
