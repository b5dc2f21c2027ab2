"""ipstudio CLI - Main application entry point and app structure."""

from typing import Annotated

from rich.console import Console
import typer

from ipstudio import __version__
from ipstudio.config import get_logger, log_startup_info, setup_loguru_logger
from ipstudio.infrastructure.cli.upload_commands import register_upload_commands

VERSION = __version__

# Initialize console and logger with reasonable width
console = Console(width=80)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"🎛️ ipstudio v{VERSION} - Register music and video with clear rights",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

register_upload_commands(app)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold bright_blue]🎛️ ipstudio[/bold bright_blue] [dim]v{VERSION}[/dim]")


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize ipstudio CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)
    if verbose:
        log_startup_info()


def main() -> int:
    """Application entry point."""
    return app() or 0


if __name__ == "__main__":
    raise SystemExit(main())
