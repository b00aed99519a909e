import click

from ocischema.helper.utils import DEFAULTS, LOG_LEVELS, config_path, get_config, save_config


@click.group()
def config():
    """Manage ocischema configuration."""
    pass


@config.command()
def show():
    """Show the current configuration."""
    settings = get_config()["DEFAULT"]
    click.echo(f"Config file: {config_path()}")
    for name in DEFAULTS:
        click.echo(f"{name}: {settings.get(name) or 'Not set'}")


@config.command(name="set")
@click.option("--schema-dir", required=False, type=click.Path(file_okay=False), help="Directory of schema sources")
@click.option(
    "--format-mode",
    required=False,
    type=click.Choice(["strict", "advisory"]),
    help="Report format failures (strict) or only log them (advisory)",
)
@click.option("--log-level", required=False, type=click.Choice(LOG_LEVELS), help="Log level")
def set_config(schema_dir, format_mode, log_level):
    """Set configuration values."""
    config = get_config()
    changes = {"schema_dir": schema_dir, "format_mode": format_mode, "log_level": log_level}
    for name, value in changes.items():
        if value is not None:
            config["DEFAULT"][name] = value
            click.echo(f"Setting {name} to {value}")
    save_config(config)
