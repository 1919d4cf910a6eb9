import pytest
from pydantic import ValidationError

from openapi_probe.parser.base import Endpoint, ParameterInfo, ParseResult


class TestParameterInfo:
    def test_placeholder_defaults_to_empty(self):
        p = ParameterInfo(name="limit", location="query")
        assert p.placeholder_value == ""

    def test_none_placeholder_becomes_empty(self):
        p = ParameterInfo(name="limit", location="query", placeholder_value=None)
        assert p.placeholder_value == ""

    def test_is_immutable(self):
        p = ParameterInfo(name="id", location="path", placeholder_value="1")
        with pytest.raises(ValidationError):
            p.name = "other"


class TestEndpoint:
    def test_defaults(self):
        ep = Endpoint(index=1)
        assert ep.scheme == "https"
        assert ep.method == "GET"
        assert ep.server == ""
        assert ep.path == "/"
        assert ep.parameters == ()
        assert ep.description == ""

    def test_none_fields_use_defaults(self):
        ep = Endpoint(index=3, scheme=None, method=None, server=None, path=None, parameters=None, description=None)
        assert (ep.scheme, ep.method, ep.server, ep.path) == ("https", "GET", "", "/")
        assert ep.parameters == ()

    def test_method_is_uppercased(self):
        assert Endpoint(index=1, method="patch").method == "PATCH"

    def test_server_drops_trailing_slash(self):
        assert Endpoint(index=1, server="https://api.example.com/").server == "https://api.example.com"

    def test_server_drops_repeated_trailing_slashes(self):
        assert Endpoint(index=1, server="https://h//").server == "https://h"

    def test_duplicate_parameter_names_allowed(self):
        ep = Endpoint(
            index=1,
            path="/items/{id}",
            parameters=[
                ParameterInfo(name="id", location="path", placeholder_value="1"),
                ParameterInfo(name="id", location="query"),
            ],
        )
        assert [p.location for p in ep.parameters] == ["path", "query"]
        assert ep.parameters_in("query")[0].name == "id"

    def test_is_immutable(self):
        ep = Endpoint(index=1)
        with pytest.raises(ValidationError):
            ep.path = "/other"

    def test_filter_text(self):
        ep = Endpoint(index=1, method="GET", path="/pets", server="https://api.example.com")
        assert ep.filter_text() == "GET /pets https://api.example.com"

    def test_parameter_summary(self):
        ep = Endpoint(
            index=1,
            parameters=[
                ParameterInfo(name="id", location="path", placeholder_value="1"),
                ParameterInfo(name="session", location="cookie"),
            ],
        )
        assert ep.parameter_summary() == "PATH:id, COOKIE:session"
        assert Endpoint(index=2).parameter_summary() == ""

    def test_serialization_roundtrip(self):
        ep = Endpoint(
            index=7,
            method="DELETE",
            path="/api/users/{id}",
            parameters=[ParameterInfo(name="id", location="path", placeholder_value="1")],
        )
        ep2 = Endpoint(**ep.model_dump())
        assert ep2 == ep


class TestParseResult:
    def test_empty(self):
        result = ParseResult()
        assert result.endpoints == ()
        assert result.messages == ()
        assert result.default_server == ""
