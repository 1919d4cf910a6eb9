"""Spec retrieval from URLs and files.

A failed URL or file load falls back to pasted spec content when some
was supplied; otherwise it raises SpecLoadError.
"""

import logging
from pathlib import Path
from typing import NamedTuple

import requests

from openapi_probe.config import Settings, get_settings
from openapi_probe.parser.base import ParseResult
from openapi_probe.parser.detect import detect_source
from openapi_probe.parser.swagger import parse

logger = logging.getLogger(__name__)

PASTED_SOURCE = "(pasted)"


class SpecLoadError(Exception):
    """Spec content could not be retrieved and there was nothing to fall back on."""


class LoadedSpec(NamedTuple):
    text: str
    source: str


def fetch_url(url: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    response = requests.get(
        url,
        timeout=settings.request_timeout,
        verify=settings.verify_ssl,
        headers={"User-Agent": settings.user_agent},
    )
    response.raise_for_status()
    return response.content.decode("utf-8-sig", errors="replace")


def read_file(path: Path) -> str:
    return path.read_bytes().decode("utf-8-sig", errors="replace")


def load_spec_text(
    location: str | None,
    raw_fallback: str | None = None,
    settings: Settings | None = None,
) -> LoadedSpec:
    """Load spec text from a URL or file, falling back to pasted content."""
    kind = detect_source(location)

    if kind == "raw":
        if raw_fallback and raw_fallback.strip():
            return LoadedSpec(raw_fallback, PASTED_SOURCE)
        raise SpecLoadError("No spec location or content provided")

    location = location.strip()
    if kind == "url":
        try:
            return LoadedSpec(fetch_url(location, settings), location)
        except requests.RequestException as e:
            logger.error("Failed to load URL %s: %s", location, e)
            return _fallback(raw_fallback, f"Unable to load from URL: {e}")

    path = Path(location).expanduser()
    if not path.is_file():
        return _fallback(raw_fallback, f"File not found: {location}")
    try:
        return LoadedSpec(read_file(path), str(path))
    except OSError as e:
        logger.error("Failed to load file %s: %s", path, e)
        return _fallback(raw_fallback, f"Unable to read file: {e}")


def load_catalog(
    location: str | None,
    raw_fallback: str | None = None,
    settings: Settings | None = None,
) -> ParseResult:
    """Load spec text and parse it into a catalog."""
    settings = settings or get_settings()
    loaded = load_spec_text(location, raw_fallback, settings)
    return parse(loaded.source, loaded.text, validate=settings.validate_spec)


def _fallback(raw_fallback: str | None, error: str) -> LoadedSpec:
    if raw_fallback and raw_fallback.strip():
        logger.warning("%s; using pasted spec content", error)
        return LoadedSpec(raw_fallback, PASTED_SOURCE)
    raise SpecLoadError(error)
