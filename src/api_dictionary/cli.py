"""CLI entry point for api-dictionary."""

import fnmatch
from pathlib import Path

import click

from api_dictionary.dictionary.walker import build_dictionary
from api_dictionary.models import DataDictionary
from api_dictionary.parser.loader import DocumentLoadError, load_document
from api_dictionary.writer.excel import write_excel
from api_dictionary.writer.html import write_html
from api_dictionary.writer.json_writer import write_json

JSON_NAME = "data-dictionary.json"
XLSX_NAME = "data-dictionary.xlsx"
HTML_NAME = "index.html"

TABLE_COLUMNS = ("method", "path", "location", "httpStatus", "fieldPath", "type", "required", "issues")


def _build(doc_path: Path) -> DataDictionary:
    """Load, dereference and flatten a document; fatal input errors abort the command."""
    try:
        loaded = load_document(doc_path)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e
    return build_dictionary(loaded.document, loaded.references, source=str(doc_path))


def _matches(method: str, path: str, pattern: str) -> bool:
    """Match 'METHOD /path' or '/path' glob patterns."""
    if " " in pattern:
        want_method, want_path = pattern.split(" ", 1)
        return method.upper() == want_method.upper() and fnmatch.fnmatch(path, want_path.strip())
    return fnmatch.fnmatch(path, pattern)


def _filter_dictionary(dictionary: DataDictionary, patterns: tuple[str, ...]) -> DataDictionary:
    """Keep only the operations matching any of the patterns."""
    if not patterns:
        return dictionary

    def keep(item) -> bool:
        return any(_matches(item.method, item.path, p) for p in patterns)

    return dictionary.model_copy(
        update={
            "field_instances": [r for r in dictionary.field_instances if keep(r)],
            "endpoints": [e for e in dictionary.endpoints if keep(e)],
        }
    )


@click.group()
def main():
    """API Dictionary — flatten OpenAPI documents into a per-field data dictionary."""
    pass


@main.command()
@click.argument("doc_path", envvar="OPENAPI_PATH", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory.")
@click.option("--format", "fmt", default="all", type=click.Choice(["all", "json", "xlsx", "html"]), help="Artifact(s) to write.")
@click.option("--endpoint", "endpoints", multiple=True, help="Only include operations matching 'METHOD /path' or '/path' (glob).")
def generate(doc_path: Path, output: Path, fmt: str, endpoints: tuple[str, ...]):
    """Generate the data dictionary artifacts for an OpenAPI document."""
    click.echo(f"Loading OpenAPI document from {doc_path}...")
    dictionary = _filter_dictionary(_build(doc_path), endpoints)
    info = dictionary.api_info
    click.echo(f"Parsed: {info.title} v{info.version}")

    output.mkdir(parents=True, exist_ok=True)
    if fmt in ("all", "json"):
        path = write_json(dictionary, output / JSON_NAME)
        click.echo(f"  Generated {path} ({len(dictionary.field_instances)} field instances)")
    if fmt in ("all", "xlsx"):
        path = write_excel(dictionary, output / XLSX_NAME)
        click.echo(f"  Generated {path}")
    if fmt in ("all", "html"):
        path = write_html(info, output / HTML_NAME)
        click.echo(f"  Generated {path}")

    click.echo(f"Done! {len(dictionary.endpoints)} endpoints, {len(dictionary.schemas)} schemas.")


@main.command()
@click.argument("doc_path", envvar="OPENAPI_PATH", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--endpoint", "endpoints", multiple=True, help="Only include operations matching 'METHOD /path' or '/path' (glob).")
def fields(doc_path: Path, endpoints: tuple[str, ...]):
    """Print the sorted field records as a tab separated table."""
    dictionary = _filter_dictionary(_build(doc_path), endpoints)
    click.echo("\t".join(TABLE_COLUMNS))
    for record in dictionary.field_instances:
        row = record.to_row()
        click.echo("\t".join(str(row[column]) for column in TABLE_COLUMNS))
