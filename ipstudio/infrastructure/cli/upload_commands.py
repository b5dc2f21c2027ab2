"""Authoring commands: policy lookup, price quotes, step tables, submit and show."""

import asyncio
from pathlib import Path
from typing import Annotated

from rich.console import Console
import typer

from ipstudio.application.form import STEP_TITLES, skipped_steps, step_titles
from ipstudio.application.form.controller import UploadFormController
from ipstudio.application.use_cases import SubmitTrackResult
from ipstudio.config import get_logger
from ipstudio.domain.entities import ContentType, LicensingSelection, UploadMode
from ipstudio.domain.policy import (
    allowed_licensing,
    default_download_price,
    normalize_licensing,
    price,
    required_fields,
    rules_for,
)
from ipstudio.infrastructure.bootstrap import build_collaborators
from ipstudio.infrastructure.cli.drafts import apply_draft, load_draft
from ipstudio.infrastructure.cli.ui import (
    command_error_handler,
    display_policy,
    display_quote,
    display_review,
    display_steps,
)
from ipstudio.infrastructure.persistence.database import dispose_engine, init_db

# Initialize console and logger
console = Console()
logger = get_logger(__name__)


def register_upload_commands(app: typer.Typer) -> None:
    """Register authoring commands with the Typer app."""
    app.command(name="policy", rich_help_panel="📋 Rules")(policy)
    app.command(name="quote", rich_help_panel="📋 Rules")(quote)
    app.command(name="steps", rich_help_panel="📋 Rules")(steps)
    app.command(name="submit", rich_help_panel="🎛️ Assets")(submit)
    app.command(name="show", rich_help_panel="🎛️ Assets")(show)


@command_error_handler
def policy(
    content_type: Annotated[ContentType, typer.Argument(help="Content type")],
    mode: Annotated[UploadMode, typer.Option("--mode", "-m")] = UploadMode.ADVANCED,
) -> None:
    """Show required fields, licensing options and file limits for a content type."""
    display_policy(
        rules_for(content_type),
        required_fields(content_type, mode),
        sorted(capability.value for capability in allowed_licensing(content_type)),
    )


@command_error_handler
def quote(
    content_type: Annotated[ContentType, typer.Argument(help="Content type")],
    items: Annotated[int, typer.Option("--items", "-n", min=1, help="Bundle item count")] = 1,
    downloads: Annotated[bool, typer.Option("--downloads/--no-downloads")] = False,
    unit_price: Annotated[
        float | None, typer.Option("--price", min=0, help="Download price per item")
    ] = None,
    protected: Annotated[bool, typer.Option("--protected", help="Remix-protect the asset")] = False,
) -> None:
    """Quote the price for a licensing choice."""
    selection = LicensingSelection(remix_protected=protected)
    if downloads:
        selection = selection.with_downloads(
            True, unit_price if unit_price is not None else default_download_price(content_type)
        )
    selection = normalize_licensing(content_type, selection)
    display_quote(price(content_type, selection, items if content_type.is_bundle else 1))


@command_error_handler
def steps(
    mode: Annotated[UploadMode, typer.Option("--mode", "-m")] = UploadMode.ADVANCED,
    content_type: Annotated[ContentType, typer.Option("--content-type", "-t")] = ContentType.LOOP,
) -> None:
    """Show the authoring steps for a mode and content type."""
    console.print(f"[bold]{mode.value.capitalize()} mode · {content_type.label}[/bold]")
    display_steps(
        step_titles(mode),
        [STEP_TITLES[step] for step in skipped_steps(mode, content_type)],
    )


async def _submit_draft(path: Path, record_id: str | None) -> SubmitTrackResult:
    draft = load_draft(path)
    identity = draft.get("identity")
    await init_db()
    try:
        collaborators = build_collaborators()
        record_id = record_id or draft.get("record_id")
        if record_id:
            controller = await UploadFormController.for_edit(collaborators, identity, record_id)
        else:
            controller = await UploadFormController.open(collaborators, identity)

        await apply_draft(controller, draft, path.parent)
        display_review(controller.review_summary())
        return await controller.submit()
    finally:
        await dispose_engine()


@command_error_handler
def submit(
    draft: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="JSON draft")
    ],
    record_id: Annotated[
        str | None, typer.Option("--record-id", help="Edit an existing record")
    ] = None,
) -> None:
    """Run a JSON draft through the authoring flow and store it."""
    result = asyncio.run(_submit_draft(draft, record_id))
    console.print(
        f"\n[bold green]✓ Stored {result.record_id}[/bold green] "
        f"[dim]({result.execution_time_ms} ms)[/dim]"
    )


async def _load_for_review(record_id: str, identity: str | None) -> UploadFormController:
    await init_db()
    try:
        return await UploadFormController.for_edit(build_collaborators(), identity, record_id)
    finally:
        await dispose_engine()


@command_error_handler
def show(
    record_id: Annotated[str, typer.Argument(help="Stored record id")],
    identity: Annotated[
        str | None, typer.Option("--identity", "-i", envvar="IPSTUDIO_IDENTITY")
    ] = None,
) -> None:
    """Load a stored record for editing and show its review summary."""
    controller = asyncio.run(_load_for_review(record_id, identity))
    display_review(controller.review_summary(), record_id=record_id)
    if controller.display_price is not None:
        console.print(f"[dim]Download total: {controller.display_price:.2f}[/dim]")
