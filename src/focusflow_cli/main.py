"""Main entry point for FocusFlow CLI."""

import logging

import typer

from focusflow_cli import __version__
from focusflow_cli.commands import config, timer
from focusflow_cli.services.config_service import get_config_service
from focusflow_cli.utils.logger import enable_console_logging, get_logger
from focusflow_cli.utils.typer_helpers import SuggestingGroup
from focusflow_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="focusflow",
    cls=SuggestingGroup,
    help="A Pomodoro focus timer for the command line",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print log messages to stderr"
    ),
) -> None:
    """A Pomodoro focus timer for the command line."""
    get_logger()
    if verbose:
        enable_console_logging(logging.DEBUG)


# Add subcommands
app.add_typer(timer.app, name="timer", help="Pomodoro timer for focus sessions")
app.add_typer(config.app, name="config", help="Configuration management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information and the active storage backend."""
    console.print(f"[bold]FocusFlow CLI[/bold] version [cyan]{__version__}[/cyan]")

    try:
        storage = get_config_service().config.storage
    except RuntimeError as e:
        console.print(f"[yellow]⚠ {e}[/yellow]")
        return

    if storage.backend == "remote":
        console.print(f"Storage: [cyan]remote[/cyan] ({storage.endpoint})")
    else:
        console.print("Storage: [cyan]local[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
