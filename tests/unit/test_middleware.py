"""
Unit tests for the middleware chain and the bundled middleware.
"""

import json
import logging

import pytest

from rota import MiddlewareChain, Middleware, ok, unauthorized
from rota.http import HTTPStatus
from rota.middleware import (
    LoggingMiddleware,
    ErrorHandlerMiddleware,
    CORSMiddleware,
    CORSConfig,
)
from rota.middleware.base import stage_name

from conftest import make_request


class TestMiddlewareChain:
    """Tests for MiddlewareChain."""

    def test_stages_run_in_order(self, recorder):
        chain = MiddlewareChain([
            recorder.middleware("A"),
            recorder.middleware("B"),
            recorder.handler("H"),
        ])

        response = chain.run(make_request("GET", "/"))
        assert recorder.calls == ["A", "B", "H"]
        assert response.body == b"H"

    def test_wrapping_sees_inner_response(self, recorder):
        """Outer stages finish after inner ones."""
        chain = MiddlewareChain([
            recorder.wrapping("outer"),
            recorder.wrapping("inner"),
            recorder.handler("H", status=201),
        ])

        chain.run(make_request("GET", "/"))
        assert recorder.calls == [
            "outer:before", "inner:before", "H", "inner:after:201", "outer:after:201",
        ]

    def test_short_circuit(self, recorder):
        """A stage that does not call proceed() stops the chain."""
        def deny(request, proceed):
            recorder.calls.append("deny")
            return unauthorized()

        chain = MiddlewareChain([recorder.middleware("A"), deny, recorder.handler("H")])

        response = chain.run(make_request("GET", "/"))
        assert response.status == 401
        assert recorder.calls == ["A", "deny"]

    def test_past_the_end_returns_default(self):
        """Proceeding past the last stage gives 200, empty body, text/plain."""
        chain = MiddlewareChain([lambda request, proceed: proceed()])

        response = chain.run(make_request("GET", "/"))
        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.headers["Content-Type"].startswith("text/plain")

    def test_empty_chain(self):
        assert MiddlewareChain([]).run(make_request("GET", "/")).status == 200

    def test_proceed_twice_reruns_downstream(self, recorder):
        def twice(request, proceed):
            proceed()
            return proceed()

        chain = MiddlewareChain([twice, recorder.handler("H")])
        chain.run(make_request("GET", "/"))
        assert recorder.calls == ["H", "H"]

    def test_exception_propagates(self, recorder):
        def broken(request, proceed):
            raise KeyError("missing")

        chain = MiddlewareChain([recorder.wrapping("outer"), broken])

        with pytest.raises(KeyError):
            chain.run(make_request("GET", "/"))
        assert recorder.calls == ["outer:before"]

    def test_every_stage_sees_same_request(self):
        seen = []

        def remember(request, proceed):
            seen.append((id(request), dict(request.params)))
            return proceed()

        request = make_request("GET", "/users/1", params={"id": "1"})
        MiddlewareChain([remember, remember, remember]).run(request)

        assert seen == [(id(request), {"id": "1"})] * 3

    def test_context_passes_between_stages(self):
        def authenticate(request, proceed):
            request.context["user"] = "alice"
            return proceed()

        def handler(request, proceed):
            return ok(request.context["user"])

        response = MiddlewareChain([authenticate, handler]).run(make_request("GET", "/"))
        assert response.body == b"alice"

    def test_len_and_iter(self):
        stages = [lambda r, p: p(), lambda r, p: ok()]
        chain = MiddlewareChain(stages)

        assert len(chain) == 2
        assert list(chain) == stages


class TestMiddlewareBase:
    """Tests for the Middleware base class."""

    def test_subclass_is_a_stage(self):
        class RequireToken(Middleware):
            def __call__(self, request, proceed):
                if request.get_header("Authorization") != "Bearer t":
                    return unauthorized()
                return proceed()

        chain = [RequireToken(), lambda request, proceed: ok("in")]
        denied = MiddlewareChain(chain).run(make_request("GET", "/"))
        allowed = MiddlewareChain(chain).run(make_request("GET", "/", headers={"authorization": "Bearer t"}))

        assert denied.status == 401
        assert allowed.body == b"in"

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Middleware()

    def test_stage_name(self):
        def my_stage(request, proceed):
            return proceed()

        assert stage_name(my_stage).endswith("my_stage")
        assert stage_name(ErrorHandlerMiddleware()) == "ErrorHandlerMiddleware"


class TestLoggingMiddleware:
    """Tests for the access log."""

    def test_logs_request(self, caplog):
        middleware = LoggingMiddleware()
        request = make_request("GET", "/users/1", params={"id": "1"})

        with caplog.at_level(logging.INFO, logger="rota.access"):
            response = middleware(request, lambda: ok("hi"))

        assert response.body == b"hi"
        assert len(caplog.records) == 1
        assert '"GET /users/1" 200' in caplog.records[0].getMessage()

    def test_request_id_header(self, caplog):
        middleware = LoggingMiddleware()

        with caplog.at_level(logging.INFO, logger="rota.access"):
            response = middleware(make_request("GET", "/"), lambda: ok())

        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 8
        assert f"[{request_id}]" in caplog.records[0].getMessage()

    def test_custom_request_id_header(self):
        middleware = LoggingMiddleware(request_id_header="X-Trace-ID")
        response = middleware(make_request("GET", "/"), lambda: ok())

        assert "X-Trace-ID" in response.headers
        assert "X-Request-ID" not in response.headers

    def test_request_id_can_be_disabled(self):
        middleware = LoggingMiddleware(include_request_id=False)
        response = middleware(make_request("GET", "/"), lambda: ok())
        assert "X-Request-ID" not in response.headers

    def test_json_format(self, caplog):
        middleware = LoggingMiddleware(log_format="json")
        request = make_request("POST", "/users/5", params={"id": "5"}, client_address=("10.0.0.1", 5000))

        with caplog.at_level(logging.INFO, logger="rota.access"):
            middleware(request, lambda: ok({"id": 5}))

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["method"] == "POST"
        assert entry["path"] == "/users/5"
        assert entry["params"] == {"id": "5"}
        assert entry["status_code"] == 200
        assert entry["client_ip"] == "10.0.0.1"

    def test_skip_paths(self, caplog):
        middleware = LoggingMiddleware(skip_paths=["/health"])

        with caplog.at_level(logging.INFO, logger="rota.access"):
            response = middleware(make_request("GET", "/health"), lambda: ok("up"))

        assert caplog.records == []
        assert "X-Request-ID" in response.headers

    def test_logs_and_reraises(self, caplog):
        def failing():
            raise RuntimeError("database down")

        middleware = LoggingMiddleware()

        with caplog.at_level(logging.INFO, logger="rota.access"):
            with pytest.raises(RuntimeError):
                middleware(make_request("GET", "/x"), failing)

        assert caplog.records[0].levelno == logging.ERROR
        assert "database down" in caplog.records[0].getMessage()

    def test_logs_short_circuited_requests(self, router, caplog):
        router.use(LoggingMiddleware())
        router.get("/admin", lambda request, proceed: unauthorized())

        with caplog.at_level(logging.INFO, logger="rota.access"):
            router.dispatch(make_request("GET", "/admin"))

        assert '"GET /admin" 401' in caplog.records[0].getMessage()


class TestErrorHandlerMiddleware:
    """Tests for exception → 500 conversion."""

    def test_passes_responses_through(self):
        response = ErrorHandlerMiddleware()(make_request("GET", "/"), lambda: ok("fine"))
        assert response.body == b"fine"

    def test_converts_exception(self, caplog):
        def failing():
            raise ValueError("secret detail")

        with caplog.at_level(logging.ERROR):
            response = ErrorHandlerMiddleware()(make_request("GET", "/boom"), failing)

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"error": "Internal Server Error"}
        assert "secret detail" not in response.text
        assert any("GET /boom" in r.getMessage() for r in caplog.records)

    def test_expose_details(self):
        def failing():
            raise ValueError("bad value")

        response = ErrorHandlerMiddleware(expose_details=True)(make_request("GET", "/"), failing)
        assert json.loads(response.body) == {"error": "ValueError: bad value"}

    def test_in_router(self, router):
        def broken(request, proceed):
            raise RuntimeError("boom")

        router.use(ErrorHandlerMiddleware())
        router.get("/boom", broken)

        assert router.dispatch(make_request("GET", "/boom")).status == 500


class TestCORSMiddleware:
    """Tests for CORS headers and preflight."""

    def test_adds_headers(self):
        response = CORSMiddleware()(make_request("GET", "/", headers={"origin": "https://a.test"}), lambda: ok())

        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "GET" in response.headers["Access-Control-Allow-Methods"]
        assert "Authorization" in response.headers["Access-Control-Allow-Headers"]

    def test_preflight_short_circuits(self):
        called = []

        def downstream():
            called.append(True)
            return ok()

        request = make_request("OPTIONS", "/api/users", headers={
            "origin": "https://a.test",
            "access-control-request-method": "POST",
        })
        response = CORSMiddleware()(request, downstream)

        assert response.status == HTTPStatus.NO_CONTENT
        assert response.headers["Access-Control-Max-Age"] == "86400"
        assert called == []

    def test_plain_options_is_not_preflight(self):
        response = CORSMiddleware()(make_request("OPTIONS", "/"), lambda: ok("options"))
        assert response.body == b"options"

    def test_specific_origin(self):
        config = CORSConfig(allow_origins=["https://app.test"], allow_credentials=True)
        middleware = CORSMiddleware(config)

        allowed = middleware(make_request("GET", "/", headers={"origin": "https://app.test"}), lambda: ok())
        blocked = middleware(make_request("GET", "/", headers={"origin": "https://evil.test"}), lambda: ok())

        assert allowed.headers["Access-Control-Allow-Origin"] == "https://app.test"
        assert allowed.headers["Access-Control-Allow-Credentials"] == "true"
        assert allowed.headers["Vary"] == "Origin"
        assert "Access-Control-Allow-Origin" not in blocked.headers

    def test_expose_headers(self):
        middleware = CORSMiddleware(CORSConfig(expose_headers=["X-Request-ID"]))
        response = middleware(make_request("GET", "/"), lambda: ok())
        assert response.headers["Access-Control-Expose-Headers"] == "X-Request-ID"

    def test_group_preflight_route(self, router):
        """Preflight needs a route accepting OPTIONS inside the CORS group."""
        router.group("/api", lambda api: (
            api.use(CORSMiddleware())
               .get("/users", lambda request, proceed: ok([]))
               .options("/*", lambda request, proceed: proceed())
        ))

        request = make_request("OPTIONS", "/api/users", headers={"access-control-request-method": "GET"})
        response = router.dispatch(request)
        assert response.status == 204
        assert "Access-Control-Allow-Origin" in response.headers
