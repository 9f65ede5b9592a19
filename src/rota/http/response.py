"""
=============================================================================
RESPONSE VALUE AND HELPERS
=============================================================================

A response is what every stage returns: {status, headers, body}. The
router never serialises it; the transport that called dispatch() does.

=============================================================================
RESPONSES THE ROUTER ITSELF CREATES
=============================================================================

Only two responses are built by the core, everything else comes from
handlers and middleware:

    ┌────────────────────────┬────────┬──────────────────────────────────┐
    │ Situation              │ Status │ Body                             │
    ├────────────────────────┼────────┼──────────────────────────────────┤
    │ No route matched       │  404   │ b"Not Found" (text/plain)        │
    │ Chain ran past its end │  200   │ b"" (text/plain)                 │
    └────────────────────────┴────────┴──────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import json

from .status_codes import HTTPStatus


NOT_FOUND_BODY = b"Not Found"
TEXT_PLAIN = "text/plain; charset=utf-8"


@dataclass
class HTTPResponse:
    """
    A response produced by a stage and consumed by the transport.

    Middleware that post-processes a response mutates it in place and
    returns it:

        def add_header(request, proceed):
            response = proceed()
            return response.set_header("X-Powered-By", "rota")
    """

    status: Union[HTTPStatus, int] = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header and return self for chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding str as UTF-8. Returns self."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")


class ResponseBuilder:
    """
    Fluent builder for responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .header("Location", "/users/42")
            .json({"id": 42})
            .build())
    """

    def __init__(self):
        self._status: Union[HTTPStatus, int] = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = TEXT_PLAIN) -> "ResponseBuilder":
        """Plain-text body with a matching Content-Type."""
        self._headers["Content-Type"] = content_type
        return self.body(text)

    def html(self, html: str) -> "ResponseBuilder":
        return self.text(html, "text/html; charset=utf-8")

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """JSON body; pretty=True indents for human readers."""
        self._headers["Content-Type"] = "application/json"
        if pretty:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
        else:
            payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return self.body(payload)

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Shortcuts for the responses handlers return most often:
#
#     return ok({"users": []})
#     return text("Hello, World!")
#     return unauthorized()
#
# =============================================================================

def ok(body: Union[str, bytes, dict, list] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    200 OK. dict/list bodies become JSON, str becomes text/plain, bytes
    are sent as-is.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif isinstance(body, str):
        builder.text(body, content_type or TEXT_PLAIN)
    else:
        builder.body(body)
        if content_type:
            builder.header("Content-Type", content_type)

    return builder.build()


def text(body: str, status: Union[HTTPStatus, int] = HTTPStatus.OK) -> HTTPResponse:
    """Plain-text response with the given status."""
    return ResponseBuilder().status(status).text(body).build()


def json_response(data: Any, status: Union[HTTPStatus, int] = HTTPStatus.OK) -> HTTPResponse:
    """JSON response with the given status."""
    return ResponseBuilder().status(status).json(data).build()


def created(body: Union[str, bytes, dict, list] = "", location: Optional[str] = None) -> HTTPResponse:
    """201 Created, optionally with a Location header."""
    builder = ResponseBuilder().status(HTTPStatus.CREATED)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif body:
        builder.body(body)

    if location:
        builder.header("Location", location)

    return builder.build()


def no_content() -> HTTPResponse:
    """204 No Content."""
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()


def unauthorized(message: str = "Unauthorized") -> HTTPResponse:
    """401 Unauthorized, the usual short-circuit of an auth middleware."""
    return ResponseBuilder().status(HTTPStatus.UNAUTHORIZED).json({"error": message}).build()


def forbidden(message: str = "Forbidden") -> HTTPResponse:
    """403 Forbidden."""
    return ResponseBuilder().status(HTTPStatus.FORBIDDEN).json({"error": message}).build()


def not_found() -> HTTPResponse:
    """
    The fixed response dispatch returns when no route matches.

    Always 404 with the plain-text body b"Not Found"; the body is not
    configurable so transports and tests can rely on it.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.NOT_FOUND)
        .header("Content-Type", TEXT_PLAIN)
        .body(NOT_FOUND_BODY)
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """500 Internal Server Error. Keep the message generic in production."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).json({"error": message}).build()


def default_response() -> HTTPResponse:
    """
    What proceed() yields when there is no stage left to run.

    A matched route always contributes at least one handler, so this only
    shows up when the last handler itself calls proceed().
    """
    return ResponseBuilder().status(HTTPStatus.OK).header("Content-Type", TEXT_PLAIN).build()
