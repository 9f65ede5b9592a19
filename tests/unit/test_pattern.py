"""
Unit tests for the path pattern compiler.
"""

import pytest

from rota.errors import RouteRegistrationError
from rota.http.pattern import CompiledPattern, compile_pattern


SEGMENTS = ["a", "123", "user-name", "file.txt", "x y", "%20", "ünïcødé", "a:b", "*star", "line\nbreak"]
REMAINDERS = ["", "a", "a/b", "a/b/c.txt", "/", "//", "trailing/", "with spaces/x", "line\nbreak/x"]


class TestCompile:
    """Tests for compile_pattern()."""

    def test_static_template(self):
        """Static templates have no parameters."""
        pattern = compile_pattern("/test")
        assert isinstance(pattern, CompiledPattern)
        assert pattern.param_names == ()
        assert pattern.template == "/test"

    def test_named_parameter(self):
        """:name adds a parameter name."""
        pattern = compile_pattern("/users/:id")
        assert pattern.param_names == ("id",)

    def test_param_names_in_appearance_order(self):
        """Names are positional, left to right."""
        pattern = compile_pattern("/users/:user_id/posts/:post_id/*rest")
        assert pattern.param_names == ("user_id", "post_id", "rest")

    def test_wildcard_name(self):
        """*name adds a parameter name."""
        assert compile_pattern("/files/*path").param_names == ("path",)

    def test_unnamed_wildcard_is_splat(self):
        """A bare * is named splat."""
        assert compile_pattern("/files/*").param_names == ("splat",)
        assert compile_pattern("*").param_names == ("splat",)

    def test_unpacks_as_matcher_and_names(self):
        """A compiled pattern unpacks into (matcher, param_names)."""
        matcher, names = compile_pattern("/users/:id")
        assert names == ("id",)
        assert matcher.fullmatch("/users/1") is not None

    def test_non_string_template_rejected(self):
        """Templates must be strings."""
        with pytest.raises(RouteRegistrationError):
            compile_pattern(123)
        with pytest.raises(RouteRegistrationError):
            compile_pattern(None)

    def test_compilation_is_idempotent(self):
        """Compiling the same template twice gives identical behaviour."""
        first = compile_pattern("/a/:b/*c")
        second = compile_pattern("/a/:b/*c")

        assert first.param_names == second.param_names
        for path in ["/a/1/x/y", "/a//x", "/a/1/", "/b/1/2", "/a/1"]:
            assert first.match(path) == second.match(path)


class TestStaticMatching:
    """Tests for literal text in templates."""

    def test_exact_match_returns_empty_params(self):
        """A static match is {} rather than None."""
        assert compile_pattern("/test").match("/test") == {}

    def test_different_path(self):
        assert compile_pattern("/test").match("/other") is None

    def test_no_prefix_match(self):
        """The whole path must match."""
        pattern = compile_pattern("/users")
        assert pattern.match("/users/123") is None
        assert pattern.match("/api/users") is None

    def test_no_trailing_slash_normalisation(self):
        """/users and /users/ are different paths."""
        assert compile_pattern("/users").match("/users/") is None
        assert compile_pattern("/users/").match("/users") is None

    def test_dot_is_literal(self):
        """'.' in a template only matches a dot."""
        pattern = compile_pattern("/robots.txt")
        assert pattern.match("/robots.txt") == {}
        assert pattern.match("/robotsXtxt") is None

    def test_dash_is_literal(self):
        """'-' in a template only matches a dash."""
        pattern = compile_pattern("/api-v1/health")
        assert pattern.match("/api-v1/health") == {}
        assert pattern.match("/apiXv1/health") is None

    def test_other_regex_characters_are_literal(self):
        """Literal text matches itself, whatever the characters."""
        pattern = compile_pattern("/a+b/(c)/[d]/e?/$")
        assert pattern.match("/a+b/(c)/[d]/e?/$") == {}
        assert pattern.match("/aab/c/d/e/") is None

    def test_colon_without_name_is_literal(self):
        pattern = compile_pattern("/time/12:/x")
        assert pattern.param_names == ()
        assert pattern.match("/time/12:/x") == {}


class TestParameterMatching:
    """Tests for :name captures."""

    def test_captures_segment(self):
        assert compile_pattern("/users/:id").match("/users/123") == {"id": "123"}

    def test_empty_segment_fails(self):
        assert compile_pattern("/users/:id").match("/users/") is None

    def test_extra_segment_fails(self):
        assert compile_pattern("/users/:id").match("/users/123/edit") is None

    def test_multiple_parameters(self):
        pattern = compile_pattern("/users/:user_id/posts/:post_id")
        assert pattern.match("/users/123/posts/456") == {"user_id": "123", "post_id": "456"}

    def test_parameter_inside_segment(self):
        """Parameters can sit next to literal text."""
        pattern = compile_pattern("/files/:name.:ext")
        assert pattern.param_names == ("name", "ext")
        assert pattern.match("/files/report.pdf") is not None

    @pytest.mark.parametrize("segment", SEGMENTS)
    def test_any_slash_free_segment(self, segment):
        """'/' + s yields {name: s} for any non-empty slash-free s."""
        assert compile_pattern("/:name").match("/" + segment) == {"name": segment}

    def test_root_has_empty_segment(self):
        assert compile_pattern("/:name").match("/") is None

    def test_repeated_name_keeps_last_capture(self):
        pattern = compile_pattern("/:id/:id")
        assert pattern.param_names == ("id", "id")
        assert pattern.match("/1/2") == {"id": "2"}


class TestWildcardMatching:
    """Tests for *name captures."""

    def test_captures_rest_of_path(self):
        assert compile_pattern("/files/*path").match("/files/a/b.txt") == {"path": "a/b.txt"}

    def test_matches_zero_characters(self):
        """/files/*path matches /files/ with an empty capture."""
        assert compile_pattern("/files/*path").match("/files/") == {"path": ""}

    def test_requires_the_literal_prefix(self):
        assert compile_pattern("/files/*path").match("/files") is None
        assert compile_pattern("/files/*path").match("/other/a") is None

    def test_splat_default_name(self):
        assert compile_pattern("/static/*").match("/static/css/site.css") == {"splat": "css/site.css"}

    def test_bare_star_matches_everything(self):
        pattern = compile_pattern("*")
        assert pattern.match("") == {"splat": ""}
        assert pattern.match("/any/path/at/all") == {"splat": "/any/path/at/all"}

    @pytest.mark.parametrize("remainder", REMAINDERS)
    def test_any_remainder(self, remainder):
        """'/' + s yields {name: s} for any s."""
        assert compile_pattern("/*name").match("/" + remainder) == {"name": remainder}

    def test_parameter_then_wildcard(self):
        pattern = compile_pattern("/repos/:owner/*path")
        assert pattern.match("/repos/alice/src/main.py") == {"owner": "alice", "path": "src/main.py"}
