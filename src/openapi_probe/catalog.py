"""Filterable endpoint catalog view.

Keeps the loaded catalog snapshot, the filtered subset and the listeners
that want to hear about changes. Presentation code subscribes to it
instead of holding its own copy of the endpoint list.
"""

from typing import Callable

from openapi_probe.filter import EndpointFilter
from openapi_probe.parser.base import Endpoint, ParseResult

COLUMNS = ("#", "Scheme", "Method", "Server", "Path", "Parameters", "Description")

Listener = Callable[["EndpointCatalog"], None]


class EndpointCatalog:
    def __init__(self, endpoints=()):
        self.default_server = ""
        self.messages: tuple[str, ...] = ()
        self._endpoints: tuple[Endpoint, ...] = tuple(endpoints)
        self._visible: tuple[Endpoint, ...] = self._endpoints
        self._filter = EndpointFilter()
        self._listeners: list[Listener] = []

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    @property
    def visible(self) -> tuple[Endpoint, ...]:
        return self._visible

    @property
    def hit_count(self) -> int:
        return len(self._visible)

    @property
    def filter_pattern(self) -> str:
        return self._filter.pattern

    def load(self, result: ParseResult) -> None:
        """Replace the catalog with the endpoints of a fresh parse."""
        self.default_server = result.default_server
        self.messages = result.messages
        self.set_endpoints(result.endpoints)

    def set_endpoints(self, endpoints) -> None:
        self._endpoints = tuple(endpoints or ())
        self._refresh()

    def set_filter(self, pattern: str | None) -> None:
        self._filter.set_filter(pattern)
        self._refresh()

    def endpoint_at(self, row: int) -> Endpoint | None:
        if 0 <= row < len(self._visible):
            return self._visible[row]
        return None

    def selected(self, rows) -> list[Endpoint]:
        """Endpoints at the given visible rows; invalid rows are skipped."""
        result = []
        for row in rows:
            endpoint = self.endpoint_at(row)
            if endpoint is not None:
                result.append(endpoint)
        return result

    def rows(self) -> list[tuple]:
        return [
            (e.index, e.scheme, e.method, e.server, e.path, e.parameter_summary(), e.description)
            for e in self._visible
        ]

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _refresh(self) -> None:
        self._visible = tuple(self._filter.apply(self._endpoints))
        for listener in list(self._listeners):
            listener(self)
