"""Implementation of the ``reportrunner render`` command."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import contextlib
from pathlib import Path
import sys
from typing import IO, Any

import typer

from reportrunner.core.component import ReportingComponent
from reportrunner.core.config import REPORTGENERATE_YIELDRATE, XLS_WORKBOOK_PARAM
from reportrunner.core.engine import configure_engine
from reportrunner.core.exceptions import ReportingError, ReportLoadError
from reportrunner.core.targets import mime_type_from_extension

from .._options import (
    AcceptedPageOption,
    ConfigOption,
    DebugOption,
    DefinitionArgument,
    OutputPathOption,
    OutputTargetOption,
    OutputTypeOption,
    PaginateOption,
    ParamOption,
    PrinterNameOption,
    PrintOption,
    VerboseOption,
    WorkbookOption,
    YieldRateOption,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, set_cli_state


def parse_param_options(values: Iterable[str] | None) -> dict[str, Any]:
    """Turn ``NAME=VALUE`` strings into inputs; repeated names become lists."""
    params: dict[str, Any] = {}
    for entry in values or ():
        name, separator, value = entry.partition("=")
        name = name.strip()
        if not separator or not name:
            raise typer.BadParameter(
                f"Expected NAME=VALUE, got '{entry}'.", param_hint="--param"
            )
        if name not in params:
            params[name] = value
        elif isinstance(params[name], list):
            params[name].append(value)
        else:
            params[name] = [params[name], value]
    return params


@contextlib.contextmanager
def _open_output(output: Path | None, printing: bool) -> Iterator[IO[bytes] | None]:
    if printing:
        yield None
        return
    if output is None:
        yield sys.stdout.buffer
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("wb") as handle:
        yield handle


def render(
    ctx: typer.Context,
    definition: DefinitionArgument,
    output: OutputPathOption = None,
    output_type: OutputTypeOption = None,
    output_target: OutputTargetOption = None,
    paginate: PaginateOption = False,
    accepted_page: AcceptedPageOption = None,
    print_report: PrintOption = False,
    printer_name: PrinterNameOption = None,
    yield_rate: YieldRateOption = None,
    params: ParamOption = None,
    workbook: WorkbookOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render a report definition to a file, standard output, or a printer."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)

    if config is not None:
        try:
            configure_engine(config)
        except ReportingError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc

    inputs = parse_param_options(params)
    if yield_rate is not None:
        inputs[REPORTGENERATE_YIELDRATE] = yield_rate
    if output_type is None and output is not None:
        output_type = mime_type_from_extension(output.suffix)

    component = ReportingComponent(emitter=CliEmitter(state=state, debug_enabled=debug_enabled()))
    component.report_definition_path = definition
    component.output_type = output_type
    component.output_target = output_target
    component.paginate = paginate
    if accepted_page is not None:
        component.accepted_page = accepted_page
    component.print_report = print_report
    component.printer_name = printer_name

    with contextlib.ExitStack() as stack:
        if workbook is not None:
            inputs[XLS_WORKBOOK_PARAM] = stack.enter_context(workbook.open("rb"))
        component.set_inputs(inputs)
        component.output_stream = stack.enter_context(_open_output(output, print_report))
        if not component.validate():
            raise typer.Exit(code=1)
        try:
            succeeded = component.execute()
        except ReportLoadError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc

    if not succeeded:
        raise typer.Exit(code=1)

    closing = state.summary.describe(
        str(output) if output is not None else None, component.page_count
    )
    if closing and state.verbosity >= 1:
        state.err_console.print(closing, style="green", markup=False)


__all__ = ["parse_param_options", "render"]
