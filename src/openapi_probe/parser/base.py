"""Endpoint catalog data models.

The spec parser converts OpenAPI 2.0 / 3.x documents into these models;
the request generator and the catalog view only ever read them.
"""

from pydantic import BaseModel, ConfigDict, field_validator

_DEFAULTS = {
    "scheme": "https",
    "method": "GET",
    "server": "",
    "path": "/",
    "parameters": (),
    "description": "",
}


class ParameterInfo(BaseModel):
    """A single operation parameter and the value substituted for it."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # path / query / header / cookie
    placeholder_value: str = ""

    @field_validator("placeholder_value", mode="before")
    @classmethod
    def _none_placeholder(cls, value):
        return "" if value is None else value


class Endpoint(BaseModel):
    """One documented (method, path) operation."""

    model_config = ConfigDict(frozen=True)

    index: int
    scheme: str = "https"
    method: str = "GET"
    server: str = ""
    path: str = "/"
    parameters: tuple[ParameterInfo, ...] = ()
    description: str = ""

    @field_validator(*_DEFAULTS, mode="before")
    @classmethod
    def _none_to_default(cls, value, info):
        return _DEFAULTS[info.field_name] if value is None else value

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("server")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def parameters_in(self, location: str) -> list[ParameterInfo]:
        return [p for p in self.parameters if p.location == location]

    def filter_text(self) -> str:
        """Text the endpoint filter regex is searched against."""
        return f"{self.method} {self.path} {self.server}"

    def parameter_summary(self) -> str:
        return ", ".join(f"{p.location.upper()}:{p.name}" for p in self.parameters)


class ParseResult(BaseModel):
    """Outcome of one spec load: the catalog plus parser diagnostics."""

    model_config = ConfigDict(frozen=True)

    endpoints: tuple[Endpoint, ...] = ()
    messages: tuple[str, ...] = ()
    default_server: str = ""
