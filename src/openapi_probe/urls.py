"""Server URL helpers shared by the OpenAPI parser and the request generator."""

import re
from urllib.parse import SplitResult, urlsplit

# Characters that are never legal in a URI reference (RFC 3986).
_ILLEGAL_URI_CHARS = re.compile(r'[\s"<>\\^`{|}]')


def split_url(url: str) -> SplitResult:
    """Split a URL, raising ValueError where a strict URI parser would."""
    if _ILLEGAL_URI_CHARS.search(url):
        raise ValueError(f"Illegal character in URL: {url!r}")
    return urlsplit(url)


def normalize_server_url(url: str | None) -> str:
    if url is None:
        return ""
    return url.strip().rstrip("/")


def scheme_of(url: str, default: str = "https") -> str:
    """Return the URL scheme, or ``default`` when absent or unparseable."""
    if not url or not url.strip():
        return default
    try:
        scheme = split_url(url).scheme
    except ValueError:
        return default
    return scheme or default


def host_header(server: str) -> str:
    """Build the Host header value for a base URL.

    The port is only included when it differs from the scheme's default.
    Anything that cannot be parsed into a host yields ``localhost``.
    """
    try:
        parts = split_url(server)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return "localhost"
    if not host:
        return "localhost"
    if ":" in host:
        host = f"[{host}]"

    default_port = 443 if parts.scheme.lower() == "https" else 80
    if port is None or port == default_port:
        return host
    return f"{host}:{port}"
