"""Top-level ``todo-web`` command group."""

import logging
from pathlib import Path
from typing import Optional

import click

from todo_web import __version__
from todo_web.config import load_config
from todo_web.cli.config_cmds import config
from todo_web.cli.web import start


@click.group()
@click.version_option(__version__, prog_name="todo-web")
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TODO_WEB_CONFIG",
    help="Path to the YAML configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], verbose: bool):
    """Todo Web - manage todo lists in the browser."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_file
    ctx.obj["config"] = load_config(config_file)


cli.add_command(start)
cli.add_command(config)
