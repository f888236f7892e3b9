"""
Web server CLI commands for Todo Web.

This module provides the command to start the Todo Web server.
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from todo_web.web.server import start_server


console = Console()


@click.command()
@click.option("--host", default=None, help="Host to bind the server to [default: from config]")
@click.option("--port", default=None, type=int, help="Port to bind the server to [default: from config]")
@click.option(
    "--storage",
    type=click.Choice(["session", "database"]),
    default=None,
    help="Where lists are kept [default: from config]",
)
@click.option("--debug", is_flag=True, help="Enable debug mode with auto-reload")
@click.pass_context
def start(ctx: click.Context, host, port, storage, debug):
    """Start the Todo Web server."""
    config = ctx.obj["config"]
    if storage:
        config.storage = storage

    host = host or config.host
    port = port or config.port
    debug = debug or config.debug

    # Display startup message
    title = Text("Todo Web Server", style="bold cyan")
    content = Text()
    content.append("Server will start at: ", style="white")
    content.append(f"http://{host}:{port}", style="bold green")
    content.append("\n\n")
    content.append("Storage: ", style="yellow")
    content.append(config.storage, style="white")
    if config.storage == "database":
        content.append(f" ({config.database_path})", style="dim")

    if debug:
        content.append("\n")
        content.append("Debug mode: ", style="yellow")
        content.append("ENABLED", style="bold red")
        content.append(" (auto-reload on file changes)", style="white")

    console.print(Panel(content, title=title, border_style="cyan", padding=(1, 2)))
    console.print("Press Ctrl+C to stop the server", style="dim")

    try:
        start_server(config, host=host, port=port, debug=debug,
                     config_path=ctx.obj["config_path"])
    except KeyboardInterrupt:
        console.print("\nServer stopped.", style="yellow")
