"""
=============================================================================
PATH PATTERN COMPILER
=============================================================================

Turns a route template such as "/users/:id/files/*path" into an anchored
regular expression plus the ordered list of parameter names.

=============================================================================
TOKEN GRAMMAR
=============================================================================

Templates are scanned left to right. Three kinds of tokens exist:

    ┌──────────────┬──────────────────────┬───────────────────────────────┐
    │ Token        │ Regex                │ Captures                      │
    ├──────────────┼──────────────────────┼───────────────────────────────┤
    │ literal text │ re.escape(text)      │ nothing, matches itself       │
    │ :name        │ ([^/]+)              │ one non-empty segment         │
    │ *name        │ (.*)                 │ the rest, "/" included, may   │
    │              │                      │ be empty                      │
    │ *            │ (.*)                 │ same, named "splat"           │
    └──────────────┴──────────────────────┴───────────────────────────────┘

    Template:  /users/:id/files/*path
                  │     │        │
                  ▼     ▼        ▼
    Regex:     /users/([^/]+)/files/(.*)      (applied with fullmatch)
    Names:     ["id", "path"]

    "/users/7/files/a/b.txt" → {"id": "7", "path": "a/b.txt"}

Parameter names are runs of letters, digits and underscores. A ":" with no
name after it is ordinary text.

=============================================================================
WHAT IS DELIBERATELY NOT SUPPORTED
=============================================================================

- Optional segments and inline constraints (":id(\\d+)", "{id:int}")
- Trailing-slash normalisation: "/users/" and "/users" are different paths
- Partial matches: a pattern matches the whole path or nothing

"/files/*path" matches "/files/" with path == "" because the wildcard is
zero-or-more. That is intended behaviour.

=============================================================================
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple
import re

from ..errors import RouteRegistrationError


PARAM_PATTERN = r"[^/]+"
WILDCARD_PATTERN = r".*"
DEFAULT_WILDCARD_NAME = "splat"

# One token per match: ":name" (group 1) or "*name"/"*" (group 2)
_TOKEN_RE = re.compile(r":([A-Za-z0-9_]+)|\*([A-Za-z0-9_]*)")


@dataclass(frozen=True)
class CompiledPattern:
    """
    A compiled route template.

    Iterable as (matcher, param_names), so it can be unpacked:

        matcher, names = compile_pattern("/users/:id")
    """

    template: str
    regex: "re.Pattern[str]"
    param_names: Tuple[str, ...]

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a full request path.

        Returns the parameter mapping on success (empty dict for a static
        template), None when the path does not match.
        """
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        # Positional: names and groups line up 1:1; a repeated name keeps
        # the last capture.
        return dict(zip(self.param_names, found.groups()))

    def __iter__(self) -> Iterator:
        return iter((self.regex, self.param_names))


def compile_pattern(template: str) -> CompiledPattern:
    """
    Compile a route template.

    Args:
        template: Route template, e.g. "/posts/:post_id/comments"

    Returns:
        CompiledPattern with the anchored regex and parameter names

    Raises:
        RouteRegistrationError: If template is not a string
    """
    if not isinstance(template, str):
        raise RouteRegistrationError(
            f"Route path must be a string, got {type(template).__name__}",
            argument="path",
        )

    param_names = []
    regex_parts = []
    position = 0

    for token in _TOKEN_RE.finditer(template):
        # Literal text between tokens
        regex_parts.append(re.escape(template[position:token.start()]))

        param_name, wildcard_name = token.groups()
        if param_name is not None:
            param_names.append(param_name)
            regex_parts.append(f"({PARAM_PATTERN})")
        else:
            param_names.append(wildcard_name or DEFAULT_WILDCARD_NAME)
            regex_parts.append(f"({WILDCARD_PATTERN})")

        position = token.end()

    regex_parts.append(re.escape(template[position:]))

    # DOTALL so a wildcard also accepts newlines; the whole path is anchored
    # by fullmatch() in CompiledPattern.match.
    regex = re.compile("".join(regex_parts), re.DOTALL)

    return CompiledPattern(
        template=template,
        regex=regex,
        param_names=tuple(param_names),
    )
