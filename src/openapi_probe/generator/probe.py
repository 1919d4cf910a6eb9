"""Request synthesis combined with insertion point location."""

from pydantic import BaseModel, ConfigDict

from openapi_probe.parser.base import Endpoint

from .insertion import PAYLOAD_MARKER, Range, locate_ranges, mark_insertion_points
from .request import RequestGenerator, effective_server


class SynthesizedRequest(BaseModel):
    """A serialized request together with its insertion points."""

    model_config = ConfigDict(frozen=True)

    endpoint_index: int
    method: str
    path: str
    target: str
    raw: bytes
    ranges: tuple[Range, ...] = ()

    @property
    def text(self) -> str:
        return self.raw.decode("utf-8")

    def marked(self, marker: str = PAYLOAD_MARKER) -> str:
        """Request text with every insertion point wrapped in markers."""
        return mark_insertion_points(self.raw, list(self.ranges), marker).decode("utf-8")


def synthesize(
    endpoint: Endpoint,
    base_url_override: str | None = None,
    generator: RequestGenerator | None = None,
) -> SynthesizedRequest:
    generator = generator or RequestGenerator()
    raw = generator.build_request_bytes(endpoint, base_url_override)
    return SynthesizedRequest(
        endpoint_index=endpoint.index,
        method=endpoint.method,
        path=endpoint.path,
        target=effective_server(endpoint, base_url_override),
        raw=raw,
        ranges=tuple(locate_ranges(raw, endpoint)),
    )
