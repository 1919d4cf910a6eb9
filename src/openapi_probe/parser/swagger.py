"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents (JSON or YAML) into an
endpoint catalog. Problems with the document are reported as messages
on the ParseResult; nothing here raises for bad input.
"""

import json
import logging
import re

import yaml
from prance import ResolvingParser, ValidationError
from prance.util.formats import ParseError
from prance.util.url import ResolutionError

from openapi_probe.urls import normalize_server_url, scheme_of

from .base import Endpoint, ParameterInfo, ParseResult
from .validator import validate_document

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Swagger 2.0 locations that the 2->3 conversion folds into the request body.
BODY_LOCATIONS = ("body", "formdata")

PATH_PLACEHOLDER = "1"

EMPTY_MESSAGE = "Spec content is empty"
FAILED_MESSAGE = "Failed to parse OpenAPI spec"
MISSING_VERSION_MESSAGE = "attribute openapi is missing"

_DOCUMENT_START = ("openapi:", "swagger:", "{")


def parse(source_label: str, spec_text: str | None, *, validate: bool = True) -> ParseResult:
    """Parse spec text into a ParseResult.

    ``source_label`` only identifies the document in log output.
    """
    if spec_text is None or not spec_text.strip():
        return ParseResult(messages=(EMPTY_MESSAGE,))

    cleaned = strip_leading_noise(spec_text.strip())
    doc, load_errors = _load_document(cleaned)
    if doc is None:
        messages = tuple(load_errors) or (FAILED_MESSAGE,)
        _log_messages(source_label, messages)
        return ParseResult(messages=messages)

    if "openapi" not in doc and "swagger" not in doc:
        _log_messages(source_label, (MISSING_VERSION_MESSAGE,))
        return ParseResult(messages=(MISSING_VERSION_MESSAGE,))

    messages = validate_document(doc) if validate else []
    doc, resolve_errors = resolve_references(cleaned, doc)
    messages.extend(resolve_errors)

    swagger2 = "swagger" in doc
    default_server = resolve_default_server(doc)
    scheme = scheme_of(default_server)

    endpoints = []
    paths = doc.get("paths")
    if isinstance(paths, dict):
        index = 1
        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            shared = _as_list(path_item.get("parameters"))
            for method, operation in path_item.items():
                if str(method).lower() not in HTTP_METHODS or not isinstance(operation, dict):
                    continue
                endpoints.append(
                    Endpoint(
                        index=index,
                        scheme=scheme,
                        method=str(method).upper(),
                        server=default_server,
                        path=str(path),
                        parameters=_parse_parameters(shared, _as_list(operation.get("parameters")), swagger2),
                        description=_describe(operation),
                    )
                )
                index += 1

    _log_messages(source_label, messages)
    logger.debug("Parsed %d endpoints from %s", len(endpoints), source_label)
    return ParseResult(
        endpoints=tuple(endpoints),
        messages=tuple(messages),
        default_server=default_server,
    )


def strip_leading_noise(content: str) -> str:
    """Drop lines pasted before the document itself.

    Content such as ``user@host:~$ cat openapi.json`` is discarded up to
    the first line that starts with ``openapi:``, ``swagger:`` or ``{``.
    Content without such a line is returned unchanged.
    """
    if not content:
        return content
    lines = re.split(r"\r?\n", content)
    for i, line in enumerate(lines):
        if line.strip().startswith(_DOCUMENT_START):
            return "\n".join(lines[i:])
    return content


def resolve_default_server(doc: dict) -> str:
    """First declared server URL without its trailing slash, or ''."""
    if "swagger" in doc:
        urls = _swagger2_server_urls(doc)
    else:
        urls = [s.get("url") for s in _as_list(doc.get("servers")) if isinstance(s, dict)]
    if not urls:
        return ""
    first = urls[0]
    if not isinstance(first, str) or not first.strip():
        return ""
    return normalize_server_url(first)


def _load_document(text: str) -> tuple[dict | None, list[str]]:
    loaders = [_load_json, _load_yaml]
    if not text.startswith("{"):
        loaders.reverse()

    # Only the preferred loader's error is worth reporting.
    errors = []
    for loader in loaders:
        try:
            data = loader(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            if loader is loaders[0]:
                errors.append(str(e))
            continue
        if isinstance(data, dict):
            return data, []
    return None, errors


def _load_json(text: str):
    return json.loads(text)


def _load_yaml(text: str):
    return yaml.safe_load(text)


def _swagger2_server_urls(doc: dict) -> list[str]:
    host = doc.get("host")
    base_path = doc.get("basePath") or ""
    if not host:
        return [base_path or "/"]
    schemes = doc.get("schemes") or []
    if isinstance(schemes, str):
        schemes = [schemes]
    schemes = _as_list(schemes)
    if not schemes:
        return [f"//{host}{base_path}"]
    return [f"{scheme}://{host}{base_path}" for scheme in schemes]


def resolve_references(text: str, doc: dict) -> tuple[dict, list[str]]:
    """Resolve ``$ref``s with prance.

    Returns the resolved document, or ``doc`` unchanged plus a message
    when a reference cannot be resolved.
    """
    parser = ResolvingParser(spec_string=text, backend="openapi-spec-validator", strict=False, lazy=True)
    try:
        parser.parse()
    except ValidationError:
        # validation problems are reported by validate_document
        pass
    except (ResolutionError, ParseError, OSError) as e:
        logger.warning("Unable to resolve references: %s", e)
        return doc, [f"Unable to resolve references: {e}"]
    resolved = parser.specification
    return (resolved if isinstance(resolved, dict) else doc), []


def _parse_parameters(shared: list, own: list, swagger2: bool) -> list[ParameterInfo]:
    own = [p for p in own if _is_parameter(p)]
    own_keys = {_param_key(p) for p in own}
    inherited = [p for p in shared if _is_parameter(p) and _param_key(p) not in own_keys]

    result = []
    for p in inherited + own:
        location = _location(p)
        if swagger2 and location in BODY_LOCATIONS:
            continue
        placeholder = PATH_PLACEHOLDER if location == "path" else ""
        result.append(ParameterInfo(name=str(p["name"]), location=location, placeholder_value=placeholder))
    return result


def _is_parameter(param) -> bool:
    """A mapping with a scalar name; unresolved refs and null entries are not."""
    return isinstance(param, dict) and isinstance(param.get("name"), (str, int, float))


def _location(param: dict) -> str:
    return str(param.get("in") or "query").lower()


def _param_key(param: dict) -> tuple[str, str]:
    return str(param["name"]), _location(param)


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _describe(operation: dict) -> str:
    if operation.get("summary") is not None:
        return str(operation["summary"])
    if operation.get("description") is not None:
        return str(operation["description"])
    return ""


def _log_messages(source_label: str, messages) -> None:
    for message in messages:
        logger.info("OpenAPI parse: %s (%s)", message, source_label)
