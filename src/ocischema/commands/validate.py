import logging
from typing import Optional

import click

from ocischema.digest import verify_digest
from ocischema.errors import MalformedInputError, SchemaLoadError
from ocischema.helper.utils import get_setting
from ocischema.schema.compat import to_legacy
from ocischema.schema.formats import FormatMode
from ocischema.schema.mediatype import DocumentKind, Validator, check_bindings
from ocischema.schema.registry import DefinitionRegistry

logger = logging.getLogger(__name__)

KIND_NAMES = [kind.cli_name for kind in DocumentKind]


def setup_registry(schema_dir: Optional[str] = None) -> DefinitionRegistry:
    schema_dir = schema_dir or get_setting("schema_dir")
    try:
        if not schema_dir:
            return DefinitionRegistry.default()
        registry = DefinitionRegistry.load(schema_dir)
        check_bindings(registry)
        return registry
    except SchemaLoadError as e:
        raise click.ClickException(f"Cannot load schemas: {e}") from e


def setup_validator(kind_name: str, schema_dir: Optional[str] = None) -> Validator:
    mode = get_setting("format_mode")
    try:
        format_mode = FormatMode[mode.capitalize()]
    except KeyError as e:
        raise click.ClickException(f"Invalid format_mode {mode} in configuration") from e
    return Validator(
        DocumentKind.from_name(kind_name), setup_registry(schema_dir), format_mode
    )


def check_file(
    validator: Validator, file_path: str, legacy: bool, expected_digest: Optional[str]
) -> list:
    """Returns the problems found in one file, empty if it is valid."""
    with open(file_path, "rb") as f:
        data = f.read()

    if expected_digest:
        try:
            verify_digest(expected_digest, data)
        except ValueError as e:
            return [str(e)]

    source = data
    if legacy:
        try:
            source = to_legacy(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            return [f"malformed input: {e}"]

    try:
        return [str(v) for v in validator.violations(source)]
    except MalformedInputError as e:
        return [str(e)]


@click.command()
@click.option(
    "--kind",
    "kind_name",
    required=True,
    type=click.Choice(KIND_NAMES),
    help="Kind of document to validate against",
)
@click.option(
    "--legacy",
    is_flag=True,
    default=False,
    help="Rewrite OCI media types to their Docker equivalents before validating",
)
@click.option(
    "--digest",
    "expected_digest",
    required=False,
    help="Expected digest of the raw file, e.g. sha256:<hex>",
)
@click.option(
    "--schema-dir",
    required=False,
    type=click.Path(exists=True, file_okay=False),
    help="Directory of schema sources to use instead of the packaged ones",
)
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def validate(kind_name, legacy, expected_digest, schema_dir, files):
    """Validate documents against the schema of a document kind"""
    if expected_digest and len(files) > 1:
        raise click.UsageError("--digest can only be used with a single file")
    validator = setup_validator(kind_name, schema_dir)

    failed = 0
    for file_path in files:
        problems = check_file(validator, file_path, legacy, expected_digest)
        if not problems:
            click.echo(f"{file_path}: valid {kind_name}")
            continue
        failed += 1
        logger.info(f"{file_path} failed with {len(problems)} problem(s)")
        click.echo(f"{file_path}: invalid {kind_name}")
        for problem in problems:
            click.echo(f"  {problem}")

    if failed:
        raise click.ClickException(f"{failed} of {len(files)} document(s) failed validation")
