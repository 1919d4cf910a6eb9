"""Raw HTTP request synthesis for catalog endpoints."""

import re

from openapi_probe.parser.base import Endpoint
from openapi_probe.urls import host_header

PATH_PARAM_PLACEHOLDER = "1"
BODY_PLACEHOLDER = "{}"
FALLBACK_SERVER = "https://localhost"
USER_AGENT = "OpenAPI-Probe/1.0"

BODY_METHODS = ("POST", "PUT", "PATCH")

_TEMPLATE_TOKEN = re.compile(r"\{[^}]+\}")


def has_body(method: str) -> bool:
    return method.upper() in BODY_METHODS


def effective_server(endpoint: Endpoint, base_url_override: str | None = None) -> str:
    """Server a request for ``endpoint`` is addressed to."""
    if base_url_override and base_url_override.strip():
        server = base_url_override
    elif endpoint.server:
        server = endpoint.server
    else:
        server = FALLBACK_SERVER
    return server.rstrip("/")


def substitute_path_params(path: str, parameters) -> str:
    """Fill ``{name}`` tokens with placeholder values.

    Declared path parameters use their placeholder; any token left over
    becomes ``1`` so no template syntax reaches the request line.
    """
    result = path
    for p in parameters:
        if p.location == "path":
            result = result.replace("{" + p.name + "}", p.placeholder_value or PATH_PARAM_PLACEHOLDER)
    return _TEMPLATE_TOKEN.sub(PATH_PARAM_PLACEHOLDER, result)


def build_query(parameters) -> str:
    return "&".join(f"{p.name}={p.placeholder_value}" for p in parameters if p.location == "query")


class RequestGenerator:
    """Builds raw HTTP/1.1 requests from endpoints.

    Requests are not sanitized; placeholder values may later be replaced
    with security-test payloads.
    """

    def __init__(self, user_agent: str = USER_AGENT):
        self.user_agent = user_agent

    def build_request_text(self, endpoint: Endpoint, base_url_override: str | None = None) -> str:
        server = effective_server(endpoint, base_url_override)

        path = substitute_path_params(endpoint.path, endpoint.parameters)
        query = build_query(endpoint.parameters)
        if query:
            path = f"{path}?{query}"

        body = has_body(endpoint.method)

        lines = [
            f"{endpoint.method} {path} HTTP/1.1",
            f"Host: {host_header(server)}",
            f"User-Agent: {self.user_agent}",
        ]
        if body:
            lines.append("Content-Type: application/json")
            lines.append(f"Content-Length: {len(BODY_PLACEHOLDER)}")

        request = "\r\n".join(lines) + "\r\n\r\n"
        if body:
            request += BODY_PLACEHOLDER
        return request

    def build_request_bytes(self, endpoint: Endpoint, base_url_override: str | None = None) -> bytes:
        return self.build_request_text(endpoint, base_url_override).encode("utf-8")
