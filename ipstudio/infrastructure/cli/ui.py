"""UI helpers for CLI interaction.

This module provides reusable rich renderers and the command error handler,
keeping the presentation logic separate from business logic.
"""

from collections.abc import Callable, Sequence
import functools
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
import typer

from ipstudio.application.form.controller import ReviewSummary
from ipstudio.config import get_logger, settings
from ipstudio.domain.entities import PriceQuote
from ipstudio.domain.exceptions import StudioError, ValidationError
from ipstudio.domain.policy import ContentTypeRules

# Initialize console and logger
console = Console()
logger = get_logger(__name__)

# Type variables for command handler decorator
P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Validation errors are shown as a table, other studio errors as their
    user-visible message, and anything else is logged with its traceback.
    Every failure exits with code 1.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except (typer.Exit, typer.Abort):
                raise

            except ValidationError as e:
                logger.info(f"{operation} rejected with {len(e.errors)} validation errors")
                display_errors(e.errors)
                raise typer.Exit(code=1) from e

            except StudioError as e:
                logger.warning(f"{operation} failed: {e.user_message}")
                console.print(f"\n[bold red]✗ {e.user_message}[/bold red]")
                raise typer.Exit(code=1) from e

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def display_errors(errors: Sequence[str]) -> None:
    """Show every validation error together."""
    table = Table(title="Please fix the following", title_style="bold red", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Problem", style="red")
    for index, error in enumerate(errors, start=1):
        table.add_row(str(index), error)
    console.print(table)


def _money(amount: float | None) -> str:
    return "—" if amount is None else f"${amount:.2f} {settings.pricing.currency}"


def display_quote(quote: PriceQuote) -> None:
    table = Table(title=f"{quote.content_type.label} price", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Items", str(quote.item_count))
    table.add_row("Remix fee", _money(quote.remix_fee))
    table.add_row("Download (per item)", _money(quote.download_unit_price))
    table.add_row("Download total", _money(quote.download_total))
    if quote.allow_streaming is not None:
        table.add_row("Streaming", "yes" if quote.allow_streaming else "no")
    console.print(table)

    line = quote.price_line()
    console.print(f"[bold]{line}[/bold]" if line else "[dim]No active price[/dim]")


def display_policy(
    rules: ContentTypeRules, required: Sequence[str], licensing: Sequence[str]
) -> None:
    table = Table(title=f"{rules.content_type.label} policy", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Required fields", ", ".join(required))
    table.add_row("Licensing options", ", ".join(licensing))
    if rules.is_bundle:
        table.add_row("Files", f"{rules.min_files}–{rules.max_files} {rules.unit_noun} files")
    table.add_row("Max file size", f"{rules.file_ceiling_mb} MB")
    if rules.max_duration_seconds is not None:
        table.add_row("Max duration", f"{rules.max_duration_seconds:g} s")
    table.add_row("Remix protection", "available" if rules.remix_toggleable else "not available")
    console.print(table)


def display_steps(titles: Sequence[str], skipped: Sequence[str] = ()) -> None:
    for number, title in enumerate(titles, start=1):
        if title in skipped:
            console.print(f"  [dim]{number}. {title} (skipped)[/dim]")
        else:
            console.print(f"  [bold]{number}.[/bold] {title}")


def _split_rows(rows: Sequence[tuple[str, float]]) -> str:
    return "\n".join(f"{wallet}: {pct:g}%" for wallet, pct in rows) or "—"


def display_review(summary: ReviewSummary, record_id: str | None = None) -> None:
    """Render the review step."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Type", f"{summary.content_type} ({summary.mode})")
    table.add_row("Title", summary.title or "—")
    table.add_row("Artist", summary.artist or "—")
    table.add_row("Tags", ", ".join(summary.tags) or "—")
    table.add_row("Location", summary.location or "—")
    table.add_row("Composition", _split_rows(summary.composition))
    table.add_row("Production", _split_rows(summary.production))
    table.add_row("License", summary.license)
    if summary.price_line:
        table.add_row("Price", summary.price_line)
    for item in summary.items:
        bpm = f" · {item['bpm']} BPM" if item.get("bpm") else ""
        table.add_row(f"  #{item['position']}", f"{item['title']}{bpm}")

    title = f"Review · {record_id}" if record_id else "Review"
    console.print(Panel(table, title=title, border_style="blue"))
