"""CLI entry point for openapi-probe."""

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from openapi_probe.catalog import COLUMNS, EndpointCatalog
from openapi_probe.config import get_settings
from openapi_probe.generator.probe import synthesize
from openapi_probe.generator.request import RequestGenerator
from openapi_probe.loader import SpecLoadError, load_catalog
from openapi_probe.logging import LOG_LEVELS, configure_logging
from openapi_probe.parser.base import ParseResult


def _load(source: str, fallback: Path | None) -> ParseResult:
    """Parse the OpenAPI document at SOURCE ('-' reads pasted content from stdin)."""
    raw = fallback.read_text(encoding="utf-8") if fallback else None
    location = source
    if source == "-":
        location, raw = None, sys.stdin.read()
    try:
        return load_catalog(location, raw_fallback=raw, settings=get_settings())
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e


def _catalog(source: str, fallback: Path | None, pattern: str | None) -> EndpointCatalog:
    result = _load(source, fallback)
    for message in result.messages:
        click.echo(f"[parse] {message}", err=True)
    catalog = EndpointCatalog()
    catalog.load(result)
    catalog.set_filter(pattern)
    return catalog


def _format_table(rows: list[tuple]) -> str:
    table = [COLUMNS] + [tuple(str(v) for v in row) for row in rows]
    widths = [max(len(row[i]) for row in table) for i in range(len(COLUMNS))]
    return "\n".join(
        "  ".join(value.ljust(width) for value, width in zip(row, widths)).rstrip()
        for row in table
    )


source_argument = click.argument("source")
fallback_option = click.option(
    "--fallback",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Pasted spec content to use if SOURCE cannot be loaded.",
)
filter_option = click.option("--filter", "pattern", default=None, help="Regex matched against 'METHOD path server'.")
base_url_option = click.option("--base-url", default=None, help="Override the document's server URL (e.g. https://api.target.com).")


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default from OPENAPI_PROBE_LOG_LEVEL).")
def main(log_level: str | None):
    """Turn OpenAPI specs into raw HTTP requests with insertion points."""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    configure_logging(log_level or settings.log_level)


@main.command()
@source_argument
@fallback_option
@filter_option
def endpoints(source: str, fallback: Path | None, pattern: str | None):
    """List the endpoints documented by SOURCE (URL, file, or '-')."""
    catalog = _catalog(source, fallback, pattern)
    if catalog.default_server:
        click.echo(f"Default server: {catalog.default_server}")
    click.echo(_format_table(catalog.rows()))
    click.echo(f"{catalog.hit_count} of {len(catalog.endpoints)} endpoints")


@main.command()
@source_argument
@click.argument("indexes", nargs=-1, required=True, type=int)
@fallback_option
@base_url_option
@click.option("--marked", is_flag=True, help="Print the request with insertion points wrapped in § markers.")
def request(source: str, indexes: tuple[int, ...], fallback: Path | None, base_url: str | None, marked: bool):
    """Print the synthesized request for each endpoint INDEX (the '#' column)."""
    catalog = _catalog(source, fallback, None)
    by_index = {e.index: e for e in catalog.endpoints}
    missing = [i for i in indexes if i not in by_index]
    if missing:
        raise click.BadParameter(f"no endpoint with index {', '.join(map(str, missing))}", param_hint="INDEXES")

    settings = get_settings()
    generator = RequestGenerator(user_agent=settings.user_agent)
    override = base_url or settings.base_url
    for i in indexes:
        probe = synthesize(by_index[i], override, generator)
        click.echo(f"### {probe.method} {probe.path} -> {probe.target}")
        click.echo(probe.marked() if marked else probe.text)
        if not marked:
            click.echo("")
            click.echo("Insertion points: " + (", ".join(f"[{r.start}, {r.end})" for r in probe.ranges) or "none"))
        click.echo("")


@main.command()
@source_argument
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output JSON file.")
@fallback_option
@filter_option
@base_url_option
def export(source: str, output: Path, fallback: Path | None, pattern: str | None, base_url: str | None):
    """Export endpoints, requests and insertion points as JSON."""
    catalog = _catalog(source, fallback, pattern)
    settings = get_settings()
    generator = RequestGenerator(user_agent=settings.user_agent)
    override = base_url or settings.base_url

    items = []
    for endpoint in catalog.visible:
        probe = synthesize(endpoint, override, generator)
        items.append({
            "endpoint": endpoint.model_dump(mode="json"),
            "target": probe.target,
            "request": probe.text,
            "ranges": [list(r) for r in probe.ranges],
        })

    document = {
        "default_server": catalog.default_server,
        "filter": catalog.filter_pattern,
        "messages": list(catalog.messages),
        "endpoints": items,
    }
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(document, indent=2), encoding="utf-8")
    click.echo(f"Exported {len(items)} endpoints to {output}")
