"""Primary public API for reportrunner."""

from __future__ import annotations

from reportrunner.core.binder import ParameterBinder, bind_parameters, convert
from reportrunner.core.component import ExecutionResult, ExecutionState, ReportingComponent
from reportrunner.core.config import EngineConfig, ExecutionConfig, load_engine_config
from reportrunner.core.converters import (
    ConverterRegistry,
    get_converter_registry,
    set_converter_registry,
)
from reportrunner.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from reportrunner.core.encoders import EncoderSet
from reportrunner.core.engine import configure_engine, engine_context, ensure_initialized
from reportrunner.core.exceptions import (
    EncoderError,
    ParameterConversionError,
    ReportingError,
    ReportLoadError,
    ReportValidationError,
)
from reportrunner.core.loader import ReportLoader, ReportResource
from reportrunner.core.model import (
    ParameterContext,
    ParameterDefinition,
    ReportModel,
    ResultSet,
    TableModel,
)
from reportrunner.core.printing import PrintService, select_print_service
from reportrunner.core.repository import InMemoryContentRepository, ReportSession
from reportrunner.core.targets import OutputTarget, TargetResolution, resolve_output_target
from reportrunner.version import get_version


__version__ = get_version()

__all__ = [
    "ConverterRegistry",
    "DiagnosticEmitter",
    "EncoderError",
    "EncoderSet",
    "EngineConfig",
    "ExecutionConfig",
    "ExecutionResult",
    "ExecutionState",
    "InMemoryContentRepository",
    "LoggingEmitter",
    "NullEmitter",
    "OutputTarget",
    "ParameterBinder",
    "ParameterContext",
    "ParameterConversionError",
    "ParameterDefinition",
    "PrintService",
    "ReportLoadError",
    "ReportLoader",
    "ReportModel",
    "ReportResource",
    "ReportSession",
    "ReportValidationError",
    "ReportingComponent",
    "ReportingError",
    "ResultSet",
    "TableModel",
    "TargetResolution",
    "__version__",
    "bind_parameters",
    "configure_engine",
    "convert",
    "engine_context",
    "ensure_initialized",
    "get_converter_registry",
    "load_engine_config",
    "resolve_output_target",
    "select_print_service",
    "set_converter_registry",
]
