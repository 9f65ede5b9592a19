"""
=============================================================================
COMMAND-LINE INTERFACE
=============================================================================

Inspect and exercise a router without a server:

    python -m rota routes examples.app:router
    python -m rota dispatch examples.app:router GET /hello/World
    python -m rota --log-level DEBUG dispatch examples.app:router GET /nope

TARGET is "module:attribute". The attribute is either a Router or a
zero-argument callable returning one (an application factory).

Exit codes:
    0  success (a 404 from dispatch is still a success)
    1  TARGET could not be imported or is not a router
    2  bad command-line usage (argparse)

=============================================================================
"""

import argparse
import importlib
import os
import sys
from typing import List, Optional, Tuple

from . import __version__
from .config import RouterConfig, setup_logging
from .http.request import HTTPRequest
from .http.router import Router


def load_router(target: str, app_dir: str = ".") -> Router:
    """
    Import a router from "module:attribute".

    Raises:
        ValueError: Malformed target or the attribute is not a router
        ImportError: The module cannot be imported
        AttributeError: The module has no such attribute
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Target must look like 'module:attribute', got {target!r}")

    app_dir = os.path.abspath(app_dir)
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    module = importlib.import_module(module_name)
    candidate = getattr(module, attribute)

    if not isinstance(candidate, Router) and callable(candidate):
        candidate = candidate()  # Application factory

    if not isinstance(candidate, Router):
        raise ValueError(f"{target} is not a Router (got {type(candidate).__name__})")
    return candidate


def _parse_header(raw: str) -> Tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip().lower(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rota",
        description="Inspect route tables and dispatch single requests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rota routes examples.app:router
  rota dispatch examples.app:router GET /api/users/1
  rota dispatch examples.app:router POST /posts -H "Origin: https://x.test"
        """,
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: ROTA_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--app-dir",
        default=".",
        help="Directory added to sys.path before importing TARGET (default: .)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"rota {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    routes = commands.add_parser("routes", help="Print the route table")
    routes.add_argument("target", help="module:attribute of the router")

    dispatch = commands.add_parser("dispatch", help="Dispatch one request and print the response")
    dispatch.add_argument("target", help="module:attribute of the router")
    dispatch.add_argument("method", help="HTTP method, e.g. GET")
    dispatch.add_argument("path", help="Request path, e.g. /users/42")
    dispatch.add_argument(
        "--header", "-H",
        dest="headers",
        action="append",
        type=_parse_header,
        default=[],
        help="Request header 'Name: value' (repeatable)",
    )
    dispatch.add_argument("--body", "-d", default="", help="Request body")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config = RouterConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    config.validate()
    setup_logging(config)

    try:
        router = load_router(args.target, args.app_dir)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "routes":
        print(router.format_routes())
        return 0

    request = HTTPRequest(
        method=args.method.upper(),
        path=args.path,
        headers=dict(args.headers),
        body=args.body.encode("utf-8"),
    )
    response = router.dispatch(request)

    phrase = getattr(response.status, "phrase", "")
    print(f"{int(response.status)} {phrase}".rstrip())
    for name, value in response.headers.items():
        print(f"{name}: {value}")
    print()
    print(response.body.decode("utf-8", errors="replace"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
