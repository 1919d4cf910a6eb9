"""Insertion point location on serialized requests.

Offsets are searched for in the exact bytes that will be sent, so a
range always points at the placeholder as transmitted.
"""

from typing import NamedTuple

from openapi_probe.parser.base import Endpoint

from .request import PATH_PARAM_PLACEHOLDER, has_body

PAYLOAD_MARKER = "§"

_HEADER_END = b"\r\n\r\n"


class Range(NamedTuple):
    """Half-open ``[start, end)`` byte range into a raw request."""

    start: int
    end: int


def locate_ranges(raw: bytes, endpoint: Endpoint) -> list[Range]:
    """Find where path params, query values and the body sit in ``raw``.

    Path parameters resolve to the first occurrence of their placeholder,
    so parameters sharing a placeholder can all resolve to the same range.
    Header and cookie parameters are never marked. A placeholder that
    cannot be found is skipped.
    """
    ranges = []

    for p in endpoint.parameters_in("path"):
        needle = (p.placeholder_value or PATH_PARAM_PLACEHOLDER).encode("utf-8")
        idx = raw.find(needle)
        if idx >= 0:
            ranges.append(Range(idx, idx + len(needle)))

    for p in endpoint.parameters_in("query"):
        name = p.name.encode("utf-8")
        value = p.placeholder_value.encode("utf-8")
        idx = raw.find(name + b"=" + value)
        if idx >= 0:
            start = idx + len(name) + 1
            ranges.append(Range(start, start + len(value)))

    if has_body(endpoint.method):
        idx = raw.find(_HEADER_END)
        if idx >= 0:
            body_start = idx + len(_HEADER_END)
            if len(raw) > body_start:
                ranges.append(Range(body_start, len(raw)))

    return ranges


def mark_insertion_points(raw: bytes, ranges: list[Range], marker: str = PAYLOAD_MARKER) -> bytes:
    """Wrap every range in payload markers (``§value§``).

    Ranges overlapping one that is already marked are left out.
    """
    mark = marker.encode("utf-8")
    out = bytearray()
    cursor = 0
    for start, end in sorted(set(ranges)):
        if start < cursor or end > len(raw):
            continue
        out += raw[cursor:start] + mark + raw[start:end] + mark
        cursor = end
    out += raw[cursor:]
    return bytes(out)
