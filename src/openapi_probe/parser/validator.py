"""Structural diagnostics for parsed OpenAPI documents.

Validation never rejects a document: every problem found by
openapi-spec-validator is reported as a message and parsing carries on.
"""

import logging

from openapi_spec_validator import (
    OpenAPIV2SpecValidator,
    OpenAPIV30SpecValidator,
    OpenAPIV31SpecValidator,
)

logger = logging.getLogger(__name__)


def select_validator(doc: dict):
    """Pick the validator class matching the document's version field."""
    if "swagger" in doc:
        return OpenAPIV2SpecValidator
    version = str(doc.get("openapi", ""))
    if version.startswith("3.1"):
        return OpenAPIV31SpecValidator
    return OpenAPIV30SpecValidator


def format_error(error) -> str:
    location = "/".join(str(part) for part in getattr(error, "path", ()))
    message = getattr(error, "message", None) or str(error)
    return f"{location}: {message}" if location else message


def validate_document(doc: dict) -> list[str]:
    """Validate an OpenAPI document.

    Returns one message per validation error, in the order reported.
    """
    validator_cls = select_validator(doc)
    messages = []
    try:
        for error in validator_cls(doc).iter_errors():
            messages.append(format_error(error))
    except Exception as e:  # validator internals (e.g. unresolvable $ref)
        logger.warning("Spec validation aborted: %s", e)
        messages.append(f"Spec validation aborted: {e}")
    return messages
