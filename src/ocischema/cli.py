#!/bin/env python3

import logging
import sys

import click

from ocischema.commands import compat, config, document, schema, validate
from ocischema.helper.utils import LOG_LEVELS, get_setting


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose):
    """OCI image schema validation"""
    level = "DEBUG" if verbose else get_setting("log_level").upper()
    if level not in LOG_LEVELS:
        raise click.ClickException(f"Invalid log_level {level} in configuration")
    logging.basicConfig(stream=sys.stderr, level=level)


cli.add_command(validate.validate)
cli.add_command(schema.schema)
cli.add_command(compat.compat)
cli.add_command(document.digest)
cli.add_command(document.example)
cli.add_command(config.config)


if __name__ == "__main__":
    cli()
