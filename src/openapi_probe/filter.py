"""Regex filtering of endpoint catalogs.

Filter patterns come straight from user input, so their length is capped
to bound matching cost. Patterns that are too long, blank or invalid
disable filtering instead of raising.
"""

import logging
import re

from openapi_probe.parser.base import Endpoint

logger = logging.getLogger(__name__)

MAX_FILTER_LENGTH = 500


def compile_filter(pattern: str | None) -> re.Pattern | None:
    """Compile a filter pattern, or return None for "match everything"."""
    if pattern is None or not pattern.strip():
        return None
    if len(pattern) > MAX_FILTER_LENGTH:
        logger.debug("Ignoring filter longer than %d characters", MAX_FILTER_LENGTH)
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug("Ignoring invalid filter %r: %s", pattern, e)
        return None


def filter_endpoints(endpoints, pattern: str | None) -> list[Endpoint]:
    """Endpoints whose method/path/server text contains a match, in order."""
    return EndpointFilter(pattern).apply(endpoints)


class EndpointFilter:
    """Holds the current filter pattern and applies it to catalogs."""

    def __init__(self, pattern: str | None = None):
        self.pattern = ""
        self._compiled = None
        self.set_filter(pattern)

    def set_filter(self, pattern: str | None) -> None:
        self.pattern = pattern or ""
        self._compiled = compile_filter(self.pattern)

    @property
    def active(self) -> bool:
        return self._compiled is not None

    def matches(self, endpoint: Endpoint) -> bool:
        if self._compiled is None:
            return True
        return self._compiled.search(endpoint.filter_text()) is not None

    def apply(self, endpoints) -> list[Endpoint]:
        return [e for e in endpoints if self.matches(e)]
