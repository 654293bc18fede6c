"""CLI entry point for collection-openapi."""

from pathlib import Path

import click

from collection_openapi.config import configure_logging, settings
from collection_openapi.errors import CollectionFileError
from collection_openapi.exporter import FORMATS, dump_document, export_filename
from collection_openapi.openapi.converter import convert_collection
from collection_openapi.parser.detect import detect_format
from collection_openapi.parser.loader import load_collection_file


def _parse_vars(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options."""
    variables = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--var")
        key, value = pair.split("=", 1)
        variables[key.strip()] = value
    return variables


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Export API collections as OpenAPI 3.0 documents."""
    configure_logging(verbose)


@main.command()
@click.argument("collection_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Output file path. Defaults to <collection>.openapi.<ext> in the current directory.")
@click.option("--format", "fmt", default=lambda: settings.OUTPUT_FORMAT, type=click.Choice(FORMATS), help="Output format.")
@click.option("--env", "environment", default=None, help="Name of the collection environment to resolve variables from.")
@click.option("--var", "var_pairs", multiple=True, help="Variable override KEY=VALUE (repeatable).")
def export(collection_path: Path, output: Path | None, fmt: str, environment: str | None, var_pairs: tuple[str, ...]):
    """Convert a collection file into an OpenAPI document."""
    variables = _parse_vars(var_pairs)

    click.echo(f"Reading {collection_path}...")
    try:
        collection = load_collection_file(collection_path)
    except CollectionFileError as e:
        raise click.ClickException(str(e)) from e

    document = convert_collection(collection, variables=variables, environment=environment)
    click.echo(f"Converted {sum(len(ops) for ops in document['paths'].values())} operations.")

    if output is None:
        output = Path.cwd() / export_filename(document["info"]["title"], fmt, environment)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_document(document, fmt, indent=settings.JSON_INDENT), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def detect(doc_path: Path):
    """Print whether a file is a collection, an OpenAPI document, or unknown."""
    click.echo(detect_format(doc_path))
