import json

import click

from ocischema.commands.validate import KIND_NAMES
from ocischema.digest import SUPPORTED_ALGORITHMS, calculate_file_digest
from ocischema.schema.mediatype import DocumentKind
from ocischema.schema.skeletons import skeleton


@click.command()
@click.option(
    "--algorithm",
    type=click.Choice(SUPPORTED_ALGORITHMS),
    default="sha256",
    show_default=True,
    help="Digest algorithm",
)
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
def digest(algorithm, file_path):
    """Print the digest of a file's raw bytes"""
    click.echo(calculate_file_digest(file_path, algorithm))


@click.command()
@click.option(
    "--kind", "kind_name", required=True, type=click.Choice(KIND_NAMES), help="Document kind"
)
def example(kind_name):
    """Print a minimal valid document"""
    click.echo(json.dumps(skeleton(DocumentKind.from_name(kind_name)), indent=3))
