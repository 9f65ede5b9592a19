"""
pytest configuration and fixtures.
"""

from typing import Callable, List
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rota import Router
from rota.http import HTTPRequest, HTTPResponse, ResponseBuilder


def make_request(method: str, path: str, **kwargs) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path, **kwargs)


def echo_params(request: HTTPRequest, proceed) -> HTTPResponse:
    """Terminal handler returning the matched params as JSON."""
    return ResponseBuilder().json(request.params).build()


class CallRecorder:
    """
    Builds stages that append their name to a shared list.

        recorder = CallRecorder()
        router.use(recorder.middleware("M1"))
        router.get("/x", recorder.handler("H", status=201))
        ...
        assert recorder.calls == ["M1", "H"]
    """

    def __init__(self):
        self.calls: List[str] = []

    def middleware(self, name: str) -> Callable:
        def stage(request, proceed):
            self.calls.append(name)
            return proceed()
        stage.__name__ = name
        return stage

    def wrapping(self, name: str) -> Callable:
        """Middleware that records entry and exit around proceed()."""
        def stage(request, proceed):
            self.calls.append(f"{name}:before")
            response = proceed()
            self.calls.append(f"{name}:after:{int(response.status)}")
            return response
        stage.__name__ = name
        return stage

    def handler(self, name: str, status: int = 200, body: str = "") -> Callable:
        def stage(request, proceed):
            self.calls.append(name)
            return ResponseBuilder().status(status).text(body or name).build()
        stage.__name__ = name
        return stage


@pytest.fixture
def router() -> Router:
    """An empty router."""
    return Router()


@pytest.fixture
def recorder() -> CallRecorder:
    """A fresh call recorder."""
    return CallRecorder()
