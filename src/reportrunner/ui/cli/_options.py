"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
PRINT_PANEL = "Printing"
DIAGNOSTICS_PANEL = "Diagnostics"

DefinitionArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DEFINITION",
        help="YAML report definition to render.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

ParamOption = Annotated[
    list[str] | None,
    typer.Option(
        "--param",
        "-p",
        metavar="NAME=VALUE",
        help="Report parameter value. Repeat a name to pass several values.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Engine configuration file (defaults to $REPORTRUNNER_CONFIG).",
        exists=True,
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="File receiving the rendered report. Defaults to standard output.",
        dir_okay=False,
        writable=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputTypeOption = Annotated[
    str | None,
    typer.Option(
        "--output-type",
        "-t",
        metavar="MIME",
        help="Requested mime type. Inferred from the --output extension when omitted.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputTargetOption = Annotated[
    str | None,
    typer.Option(
        "--output-target",
        metavar="ID",
        help="Engine output target, used verbatim (see 'reportrunner targets').",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

PaginateOption = Annotated[
    bool,
    typer.Option(
        "--paginate",
        help="Render HTML as logical pages.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

AcceptedPageOption = Annotated[
    int | None,
    typer.Option(
        "--accepted-page",
        metavar="N",
        help="Zero-based page to emit with --paginate.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

YieldRateOption = Annotated[
    int | None,
    typer.Option(
        "--yield-rate",
        metavar="N",
        help="Yield the thread every N rows while encoding.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

WorkbookOption = Annotated[
    Path | None,
    typer.Option(
        "--workbook",
        help="Spreadsheet template handed to the Excel encoder.",
        exists=True,
        dir_okay=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

PrintOption = Annotated[
    bool,
    typer.Option(
        "--print",
        help="Send the report to a printer instead of writing it.",
        rich_help_panel=PRINT_PANEL,
    ),
]

PrinterNameOption = Annotated[
    str | None,
    typer.Option(
        "--printer-name",
        help="Printer to use; unknown names fall back to the first printer.",
        rich_help_panel=PRINT_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
