import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from openapi_probe.cli import main
from openapi_probe.config import get_settings

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES / "petstore.yaml")


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCliEndpoints:
    def test_lists_catalog(self):
        result = CliRunner().invoke(main, ["endpoints", PETSTORE])
        assert result.exit_code == 0
        assert "Default server: https://petstore.example.com/v1" in result.output
        assert "QUERY:limit, QUERY:offset" in result.output
        assert "4 of 4 endpoints" in result.output

    def test_filter(self):
        result = CliRunner().invoke(main, ["endpoints", PETSTORE, "--filter", "petId"])
        assert result.exit_code == 0
        assert "2 of 4 endpoints" in result.output

    def test_invalid_filter_shows_all(self):
        result = CliRunner().invoke(main, ["endpoints", PETSTORE, "--filter", "(unclosed"])
        assert "4 of 4 endpoints" in result.output

    def test_stdin(self):
        spec = (FIXTURES / "pasted_session.txt").read_text(encoding="utf-8")
        result = CliRunner().invoke(main, ["endpoints", "-"], input=spec)
        assert result.exit_code == 0
        assert "/health" in result.output
        assert "1 of 1 endpoints" in result.output

    def test_missing_file_fails(self, tmp_path):
        result = CliRunner().invoke(main, ["endpoints", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_fallback_file(self, tmp_path):
        result = CliRunner().invoke(main, [
            "endpoints", str(tmp_path / "nope.yaml"),
            "--fallback", str(FIXTURES / "swagger2.json"),
        ])
        assert result.exit_code == 0
        assert "3 of 3 endpoints" in result.output


class TestCliRequest:
    def test_prints_request_and_ranges(self):
        result = CliRunner().invoke(main, ["request", PETSTORE, "3"])
        assert result.exit_code == 0
        assert "GET /pets/1 HTTP/1.1\nHost: petstore.example.com\n" in result.output
        assert "Insertion points: [" in result.output

    def test_marked(self):
        result = CliRunner().invoke(main, ["request", PETSTORE, "1", "2", "--marked"])
        assert result.exit_code == 0
        assert "GET /pets?limit=§§&offset=§§ HTTP/1.1" in result.output
        assert "§{}§" in result.output

    def test_base_url_override(self):
        result = CliRunner().invoke(main, ["request", PETSTORE, "1", "--base-url", "http://127.0.0.1:8080/"])
        assert "Host: 127.0.0.1:8080\n" in result.output
        assert "-> http://127.0.0.1:8080" in result.output

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAPI_PROBE_BASE_URL", "https://staging.test:9443")
        result = CliRunner().invoke(main, ["request", PETSTORE, "1"])
        assert "Host: staging.test:9443\n" in result.output

    def test_unknown_index(self):
        result = CliRunner().invoke(main, ["request", PETSTORE, "99"])
        assert result.exit_code == 2
        assert "no endpoint with index 99" in result.output


class TestCliExport:
    def test_writes_json(self, tmp_path):
        output = tmp_path / "out" / "probe.json"
        result = CliRunner().invoke(main, ["export", PETSTORE, "-o", str(output), "--filter", "^POST"])
        assert result.exit_code == 0
        assert "Exported 1 endpoints" in result.output

        doc = json.loads(output.read_text(encoding="utf-8"))
        assert doc["default_server"] == "https://petstore.example.com/v1"
        assert doc["filter"] == "^POST"
        (item,) = doc["endpoints"]
        assert item["endpoint"]["index"] == 2
        assert item["target"] == "https://petstore.example.com/v1"
        request = item["request"].encode("utf-8")
        ((start, end),) = item["ranges"]
        assert request[start:end] == b"{}"


class TestCliLogLevel:
    def test_case_insensitive(self):
        result = CliRunner().invoke(main, ["--log-level", "debug", "endpoints", PETSTORE])
        assert result.exit_code == 0

    def test_unknown_level_is_usage_error(self):
        result = CliRunner().invoke(main, ["--log-level", "foo", "endpoints", PETSTORE])
        assert result.exit_code == 2
        assert "Invalid value for '--log-level'" in result.output

    def test_unknown_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAPI_PROBE_LOG_LEVEL", "foo")
        result = CliRunner().invoke(main, ["endpoints", PETSTORE])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not isinstance(result.exception, ValueError)
