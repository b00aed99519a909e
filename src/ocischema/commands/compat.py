import click

from ocischema.schema.compat import COMPAT_TABLE, to_legacy, to_modern


@click.group()
def compat():
    """Docker v2.2 compatibility"""
    pass


@compat.command()
def table():
    """Show the legacy to modern media type table"""
    for legacy, modern in COMPAT_TABLE.items():
        click.echo(f"{legacy}\t{modern}")


@compat.command()
@click.option(
    "--to",
    "target",
    type=click.Choice(["legacy", "modern"]),
    default="legacy",
    show_default=True,
    help="Format to rewrite media types to",
)
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
def rewrite(target, file_path):
    """Rewrite the media types of a document"""
    with open(file_path, "r", encoding="utf-8") as f:
        raw = f.read()
    rewritten = to_legacy(raw) if target == "legacy" else to_modern(raw)
    click.echo(rewritten, nl=False)
