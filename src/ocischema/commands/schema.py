import json

import click

from ocischema.commands.validate import KIND_NAMES, setup_registry
from ocischema.schema.mediatype import SCHEMA_BINDINGS, DocumentKind


@click.group()
def schema():
    """Inspect schema sources"""
    pass


@schema.command()
def kinds():
    """List document kinds with their media type and root schema"""
    for kind, source in SCHEMA_BINDINGS.items():
        click.echo(f"{kind.cli_name}\t{kind.value}\t{source}")


@schema.command()
@click.option(
    "--schema-dir",
    required=False,
    type=click.Path(exists=True, file_okay=False),
    help="Directory of schema sources to check instead of the packaged ones",
)
def check(schema_dir):
    """Load schema sources and resolve every reference"""
    registry = setup_registry(schema_dir)
    click.echo(
        f"{len(registry.sources)} source(s), "
        f"{len(registry.definitions())} definition(s): all references resolved"
    )


@schema.command()
@click.option(
    "--kind", "kind_name", required=True, type=click.Choice(KIND_NAMES), help="Document kind"
)
@click.option(
    "--schema-dir",
    required=False,
    type=click.Path(exists=True, file_okay=False),
    help="Directory of schema sources",
)
def show(kind_name, schema_dir):
    """Print the root schema source of a document kind"""
    registry = setup_registry(schema_dir)
    source = SCHEMA_BINDINGS[DocumentKind.from_name(kind_name)]
    click.echo(json.dumps(registry.source_document(source), indent=4))
