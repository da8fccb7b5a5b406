"""Implementation of the ``reportrunner targets`` command."""

from __future__ import annotations

import typer

from reportrunner.core.component import ReportingComponent
from reportrunner.core.encoders import EncoderSet
from reportrunner.core.targets import TARGET_MIME_TYPES

from ..state import get_cli_state


def targets(ctx: typer.Context) -> None:
    """List output targets, their mime types, and whether an encoder is installed."""
    from rich import box
    from rich.table import Table

    state = get_cli_state(ctx)
    encoders = EncoderSet.discover()

    table = Table(box=box.SIMPLE, header_style="bold")
    table.add_column("Target")
    table.add_column("Mime type")
    table.add_column("Encoder")
    for target, mime_type in TARGET_MIME_TYPES.items():
        slot = ReportingComponent.encoder_slot(target)
        available = getattr(encoders, slot) is not None
        table.add_row(
            target.value,
            mime_type,
            f"[green]{slot}[/]" if available else f"[dim]{slot} (not installed)[/]",
        )
    state.console.print(table)


__all__ = ["targets"]
