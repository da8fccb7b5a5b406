"""Validate, bind, and render a single report request.

``ReportingComponent`` is the entry point used by hosts. A host configures the
component (report source, output sink, inputs), calls :meth:`validate`, and on
success calls :meth:`execute`. Execution binds the inputs onto the report
parameters, resolves the output target, and dispatches to exactly one encoder
or to the printer directory.

Everything that happens inside :meth:`execute` is reported through its boolean
result; failures are logged through the diagnostic emitter and never raised.
Errors raised while loading the report (:meth:`get_report`) propagate.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from types import MappingProxyType
from typing import IO, Any, ClassVar
from urllib.parse import urlparse

from .binder import ParameterBinder
from .config import (
    REPORT_DEFINITION_INPUT,
    REPORT_DEFINITION_PATH,
    REPORTLOAD_RESURL,
    XLS_WORKBOOK_PARAM,
    ExecutionConfig,
)
from .converters import ConverterRegistry
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .encoders import EMAIL_CONTENT_HANDLER_PATTERN, EncoderSet
from .engine import get_engine_config
from .exceptions import EncoderError, ReportLoadError, ReportValidationError
from .loader import ReportLoader, ReportResource
from .messages import get_message
from .model import ParameterContext, ReportModel
from .printing import PrinterDirectory, select_print_service
from .repository import ContentRepository, ContentRepositoryProvider
from .targets import OutputTarget, TargetResolution, resolve_output_target


logger = logging.getLogger(__name__)


class ExecutionState(Enum):
    """Lifecycle of a reporting component."""

    CREATED = "created"
    VALIDATED = "validated"
    PARAMETERS_BOUND = "parameters-bound"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of :meth:`ReportingComponent.execute`."""

    success: bool
    page_count: int = -1


_FAILURE = ExecutionResult(success=False)


class ReportingComponent:
    """Orchestrates loading, parameter binding, and rendering of one report."""

    _HANDLERS: ClassVar[dict[OutputTarget, tuple[str, str]]] = {
        OutputTarget.HTML_PAGE: ("paged_html", "_render_paged_html"),
        OutputTarget.HTML_STREAM: ("html", "_render_html"),
        OutputTarget.PDF: ("pdf", "_render_pdf"),
        OutputTarget.XLS: ("xls", "_render_xls"),
        OutputTarget.CSV: ("csv", "_render_csv"),
        OutputTarget.RTF: ("rtf", "_render_rtf"),
        OutputTarget.EMAIL: ("email", "_render_email"),
    }

    def __init__(
        self,
        *,
        loader: ReportLoader | None = None,
        encoders: EncoderSet | None = None,
        printer_directory: PrinterDirectory | None = None,
        content_repository_provider: ContentRepositoryProvider | None = None,
        converter_registry: ConverterRegistry | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self._loader = loader
        self._encoders = encoders
        self._printer_directory = printer_directory
        self._content_repository_provider = content_repository_provider
        self._binder = ParameterBinder(converter_registry)
        self.emitter: DiagnosticEmitter = emitter or LoggingEmitter(logger_obj=logger)

        self._inputs: Mapping[str, Any] = MappingProxyType({})
        self._overrides: dict[str, Any] = {}
        self._report: ReportModel | None = None
        self._report_definition: ReportResource | None = None
        self._report_definition_stream: IO[bytes] | None = None
        self._report_definition_path: str | None = None
        self._session: Any = None
        self._output_stream: IO[bytes] | None = None
        self._effective_output_type: str | None = None

        self._state = ExecutionState.CREATED
        self._result: ExecutionResult | None = None

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def loader(self) -> ReportLoader:
        if self._loader is None:
            from reportrunner.adapters.definitions import YamlReportLoader

            self._loader = YamlReportLoader()
        return self._loader

    @property
    def encoders(self) -> EncoderSet:
        if self._encoders is None:
            self._encoders = EncoderSet.discover()
        return self._encoders

    @property
    def printer_directory(self) -> PrinterDirectory:
        if self._printer_directory is None:
            from reportrunner.adapters.printing import LpPrinterDirectory

            encoders = self.encoders
            printable = encoders.pdf or encoders.csv or encoders.rtf
            self._printer_directory = LpPrinterDirectory(encoder=printable)
        return self._printer_directory

    # ------------------------------------------------------------------
    # Host-facing settings
    # ------------------------------------------------------------------

    def _setting(self, field_name: str) -> Any:
        return getattr(self.build_config(), field_name)

    @property
    def output_type(self) -> str | None:
        """Requested mime type, such as ``application/pdf``."""
        return self._setting("output_type")

    @output_type.setter
    def output_type(self, value: str | None) -> None:
        self._overrides["output_type"] = value

    @property
    def mime_type(self) -> str | None:
        """Mime type of the streamed output, after any locked report preference."""
        return self._effective_output_type or self.output_type

    @property
    def output_target(self) -> str | None:
        return self._setting("output_target")

    @output_target.setter
    def output_target(self, value: str | OutputTarget | None) -> None:
        self._overrides["output_target"] = None if value is None else str(value)

    @property
    def paginate(self) -> bool:
        return self._setting("paginate")

    @paginate.setter
    def paginate(self, value: bool) -> None:
        self._overrides["paginate"] = bool(value)

    @property
    def accepted_page(self) -> int:
        return self._setting("accepted_page")

    @accepted_page.setter
    def accepted_page(self, value: int) -> None:
        self._overrides["accepted_page"] = int(value)

    @property
    def print_report(self) -> bool:
        return self._setting("print_report")

    @print_report.setter
    def print_report(self, value: bool) -> None:
        self._overrides["print_report"] = bool(value)

    @property
    def printer_name(self) -> str | None:
        """Printer to use; ``None`` selects the platform default."""
        return self._setting("printer_name")

    @printer_name.setter
    def printer_name(self, value: str | None) -> None:
        self._overrides["printer_name"] = value

    @property
    def use_content_repository(self) -> bool:
        return self._setting("use_content_repository")

    @use_content_repository.setter
    def use_content_repository(self, value: bool) -> None:
        self._overrides["use_content_repository"] = bool(value)

    @property
    def session(self) -> Any:
        return self._session

    @session.setter
    def session(self, value: Any) -> None:
        self._session = value

    @property
    def output_stream(self) -> IO[bytes] | None:
        return self._output_stream

    @output_stream.setter
    def output_stream(self, value: IO[bytes] | None) -> None:
        self._output_stream = value

    @property
    def report_definition(self) -> ReportResource | None:
        """Report definition published by the host repository."""
        return self._report_definition

    @report_definition.setter
    def report_definition(self, value: ReportResource | None) -> None:
        self._report_definition = value

    @property
    def report_definition_stream(self) -> IO[bytes] | None:
        return self._report_definition_stream

    @report_definition_stream.setter
    def report_definition_stream(self, value: IO[bytes] | None) -> None:
        self._report_definition_stream = value

    @property
    def report_definition_path(self) -> str | None:
        return self._report_definition_path

    @report_definition_path.setter
    def report_definition_path(self, value: str | Path | None) -> None:
        self._report_definition_path = None if value is None else str(value)

    @property
    def inputs(self) -> Mapping[str, Any]:
        return self._inputs

    def set_inputs(self, inputs: Mapping[str, Any]) -> None:
        """Provide every input available to the report, reserved keys included."""
        self._inputs = MappingProxyType(dict(inputs))
        stream = self._inputs.get(REPORT_DEFINITION_INPUT)
        if stream is not None:
            self._report_definition_stream = stream
        path = self._inputs.get(REPORT_DEFINITION_PATH)
        if path is not None and self._report_definition_path is None:
            self._report_definition_path = str(path)

    def get_input(self, key: str, default: Any = None) -> Any:
        value = self._inputs.get(key)
        return default if value is None else value

    def build_config(self) -> ExecutionConfig:
        """Freeze the current inputs and explicit settings into an ``ExecutionConfig``."""
        return ExecutionConfig.from_inputs(self._inputs, self._overrides)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def result(self) -> ExecutionResult | None:
        return self._result

    @property
    def page_count(self) -> int:
        """Number of logical pages rendered; ``-1`` until a pageable run completes."""
        return self._result.page_count if self._result is not None else -1

    # ------------------------------------------------------------------
    # Report loading
    # ------------------------------------------------------------------

    def _resource_url(self) -> str | None:
        value = self._inputs.get(REPORTLOAD_RESURL)
        if not isinstance(value, str):
            return None
        parsed = urlparse(value.strip())
        if not parsed.scheme or not (parsed.netloc or parsed.path):
            return None
        return value.strip()

    def get_report(self) -> ReportModel:
        """Load the report once and cache it.

        Raises:
            ReportLoadError: the definition cannot be located or parsed.
        """
        if self._report is not None:
            return self._report

        if self._report_definition_stream is not None:
            source = "stream"
            report = self.loader.load_from_stream(
                self._report_definition_stream, self._resource_url()
            )
        elif self._report_definition is not None:
            source = self._report_definition.address
            report = self.loader.load_from_resource(self._report_definition, self._session)
        elif self._report_definition_path is not None:
            source = self._report_definition_path
            report = self.loader.load_from_path(self._report_definition_path, self._session)
        else:
            raise ReportLoadError(get_message("report_definition_missing"))

        self._report = report
        self.emitter.event("report_loaded", {"report": report.name, "source": source})
        return report

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _validation_errors(self) -> list[ReportValidationError]:
        errors: list[ReportValidationError] = []
        if (
            self._report_definition is None
            and self._report_definition_stream is None
            and self._report_definition_path is None
        ):
            errors.append(ReportValidationError(get_message("report_definition_missing")))
            return errors
        if (
            self._report_definition is not None
            and self._report_definition_path is not None
            and self._session is None
        ):
            errors.append(ReportValidationError(get_message("session_missing")))
            return errors
        if self._output_stream is None and not self._print_requested():
            errors.append(ReportValidationError(get_message("output_stream_missing")))
        return errors

    def _print_requested(self) -> bool:
        try:
            return self.print_report
        except ValueError:
            return False

    def validate(self) -> bool:
        """Check that the component can run; log the first problem found."""
        errors = self._validation_errors()
        if errors:
            self.emitter.error(str(errors[0]))
            return False
        if self._state is ExecutionState.CREATED:
            self._state = ExecutionState.VALIDATED
        return True

    def execute(self) -> bool:
        """Bind parameters and render the report.

        Returns ``True`` when the selected encoder or printer succeeded. Every
        failure after the report is loaded, including unknown output targets,
        yields ``False``.

        Raises:
            ReportLoadError: the report definition cannot be loaded.
        """
        if self._state is not ExecutionState.VALIDATED:
            self.emitter.error(get_message("not_validated"))
            return False

        report = self.get_report()

        try:
            config = self.build_config()
            with ParameterContext(report) as context:
                self._binder.bind(report, self._inputs, context)
            self._state = ExecutionState.PARAMETERS_BOUND
            self.emitter.event(
                "parameters_bound",
                {"report": report.name, "parameters": sorted(report.parameter_values)},
            )

            if config.print_report:
                result = self._print(report, config)
            else:
                result = self._render(report, config)
        except Exception as exc:
            self.emitter.error(get_message("execution_failed"), exc)
            result = _FAILURE

        return self._finish(result)

    def _finish(self, result: ExecutionResult) -> bool:
        self._result = result
        self._state = ExecutionState.SUCCEEDED if result.success else ExecutionState.FAILED
        return result.success

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _print(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        directory = self.printer_directory
        service = select_print_service(directory, config.printer_name)
        self.emitter.event(
            "printer_selected", {"printer": service.name if service is not None else None}
        )
        self._state = ExecutionState.DISPATCHED
        pages = directory.print_directly(report, service, config.yield_rate)
        page_count = pages if isinstance(pages, int) and not isinstance(pages, bool) else -1
        return ExecutionResult(success=True, page_count=page_count)

    def _render(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        resolution = resolve_output_target(report, config)
        self._effective_output_type = resolution.output_type
        self.emitter.event(
            "target_resolved",
            {"target": str(resolution.target), "output_type": resolution.output_type},
        )

        handler = self._handler_for(resolution)
        if handler is None:
            self.emitter.warning(
                get_message("unknown_output_target", target=str(resolution.target))
            )
            return _FAILURE

        self._state = ExecutionState.DISPATCHED
        result = handler(report, config)
        self.emitter.event(
            "render_completed",
            {"target": str(resolution.target), "page_count": result.page_count},
        )
        return result

    def _handler_for(
        self, resolution: TargetResolution
    ) -> Callable[[ReportModel, ExecutionConfig], ExecutionResult] | None:
        if not isinstance(resolution.target, OutputTarget):
            return None
        entry = self._HANDLERS.get(resolution.target)
        if entry is None:
            return None
        slot, method = entry
        if getattr(self.encoders, slot) is None:
            return None
        return getattr(self, method)

    @classmethod
    def encoder_slot(cls, target: OutputTarget) -> str:
        """Name of the ``EncoderSet`` slot serving ``target``."""
        return cls._HANDLERS[target][0]

    def _require(self, slot: str) -> Any:
        encoder = getattr(self.encoders, slot)
        if encoder is None:
            raise EncoderError(f"No encoder registered for '{slot}' output.")
        return encoder

    def _content_handler_pattern(self, config: ExecutionConfig) -> str:
        if config.content_handler_pattern is not None:
            return config.content_handler_pattern
        engine = get_engine_config()
        if config.use_content_repository:
            return engine.resource_content_handler
        return engine.content_handler

    def _content_repository(self) -> ContentRepository:
        if self._content_repository_provider is None:
            raise EncoderError("A content repository was requested but none is configured.")
        return self._content_repository_provider(self._session)

    def _render_paged_html(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        encoder = self._require("paged_html")
        pattern = self._content_handler_pattern(config)
        if config.use_content_repository:
            pages = encoder.generate_to_repository(
                self._session,
                report,
                config.accepted_page,
                self._output_stream,
                self._content_repository(),
                pattern,
                config.yield_rate,
            )
        else:
            pages = encoder.generate(
                report, config.accepted_page, self._output_stream, pattern, config.yield_rate
            )
        return ExecutionResult(success=True, page_count=int(pages))

    def _render_html(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        encoder = self._require("html")
        pattern = self._content_handler_pattern(config)
        if config.use_content_repository:
            ok = encoder.generate_to_repository(
                self._session,
                report,
                self._output_stream,
                self._content_repository(),
                pattern,
                config.yield_rate,
            )
        else:
            ok = encoder.generate(report, self._output_stream, pattern, config.yield_rate)
        return ExecutionResult(success=bool(ok))

    def _render_pdf(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        ok = self._require("pdf").generate(report, self._output_stream, config.yield_rate)
        return ExecutionResult(success=bool(ok))

    def _render_xls(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        template = self.get_input(XLS_WORKBOOK_PARAM)
        ok = self._require("xls").generate(
            report, self._output_stream, template, config.yield_rate
        )
        return ExecutionResult(success=bool(ok))

    def _render_csv(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        ok = self._require("csv").generate(report, self._output_stream, config.yield_rate)
        return ExecutionResult(success=bool(ok))

    def _render_rtf(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        ok = self._require("rtf").generate(report, self._output_stream, config.yield_rate)
        return ExecutionResult(success=bool(ok))

    def _render_email(self, report: ReportModel, config: ExecutionConfig) -> ExecutionResult:
        ok = self._require("email").generate(
            report, self._output_stream, EMAIL_CONTENT_HANDLER_PATTERN, config.yield_rate
        )
        return ExecutionResult(success=bool(ok))


__all__ = ["ExecutionResult", "ExecutionState", "ReportingComponent"]
