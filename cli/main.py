#!/usr/bin/env python3
"""
Timeline CLI - Document revision history replay

Main entrypoint for the timeline command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import log, play, replay, stats
from timeline.config import Settings
from timeline.logging_config import setup_logging
from timeline.metrics import start_metrics_server

# Initialize Typer app
app = typer.Typer(
    name="timeline",
    help="Replay the edit history of a collaboratively written document",
    add_completion=False,
)

console = Console()

# Add command groups
app.add_typer(log.app, name="log", help="Normalized operation log")

# Add standalone commands
app.command(name="replay")(replay.replay_command)
app.command(name="stats")(stats.stats_command)
app.command(name="play")(play.play_command)


@app.callback()
def configure():
    """Configure logging and metrics from TIMELINE_* environment variables."""
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)
    start_metrics_server(settings.metrics_enabled, settings.metrics_port)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from timeline import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Timeline CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
