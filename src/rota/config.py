"""
=============================================================================
ROUTER CONFIGURATION
=============================================================================

Settings for the ambient parts of the router: logging and the access-log
middleware. Routing itself has nothing to configure; match order is
registration order and the not-found response is fixed.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m rota --log-level DEBUG routes app:router        │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ROTA_LOG_LEVEL=DEBUG python -m rota ...                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Tuple


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class RouterConfig:
    """
    Configuration for a Router and its access log.

        Development:
            RouterConfig(log_level="DEBUG")

        Production, shipping logs to an aggregator:
            RouterConfig(log_format="json", skip_paths=("/health",))
    """

    log_level: str = "INFO"
    """DEBUG shows every registered route and every dispatch miss."""

    log_format: str = "text"
    """Access-log format: 'text' (combined-log style) or 'json'."""

    request_id_header: str = "X-Request-ID"
    """Response header carrying the access log's request id."""

    skip_paths: Tuple[str, ...] = ()
    """Paths the access log ignores (health probes are noisy)."""

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """
        Build configuration from environment variables.

            ROTA_LOG_LEVEL          Logging level (default: INFO)
            ROTA_LOG_FORMAT         'text' or 'json' (default: text)
            ROTA_REQUEST_ID_HEADER  Request id header (default: X-Request-ID)
            ROTA_SKIP_PATHS         Comma-separated paths, e.g. "/health,/ready"
        """
        skip = os.getenv("ROTA_SKIP_PATHS", "")
        return cls(
            log_level=os.getenv("ROTA_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("ROTA_LOG_FORMAT", "text").lower(),
            request_id_header=os.getenv("ROTA_REQUEST_ID_HEADER", "X-Request-ID"),
            skip_paths=tuple(p.strip() for p in skip.split(",") if p.strip()),
        )

    def validate(self) -> None:
        """Fail fast on values that would only break later."""
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}.")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")
        if not self.request_id_header:
            raise ValueError("request_id_header must not be empty")


def setup_logging(config: RouterConfig) -> None:
    """
    Configure the root logger for command-line use.

    Library code never calls this; applications embedding the router keep
    their own logging setup.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("rota").setLevel(level)
