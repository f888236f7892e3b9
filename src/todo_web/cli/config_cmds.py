"""Configuration commands for Todo Web."""

import click
from rich.console import Console
from rich.syntax import Syntax

from todo_web.config import ConfigModel, default_config_path, save_config


console = Console()


@click.group()
def config():
    """Inspect and create the configuration file."""


@config.command()
@click.pass_context
def show(ctx: click.Context):
    """Print the active configuration as YAML."""
    current = ctx.obj["config"]
    console.print(Syntax(current.to_yaml(), "yaml", theme="ansi_dark"))


@config.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_context
def init(ctx: click.Context, force: bool):
    """Write a default configuration file."""
    path = ctx.obj.get("config_path") or default_config_path()
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")

    written = save_config(ConfigModel(), path)
    console.print(f"Created configuration at [bold]{written}[/bold]")
