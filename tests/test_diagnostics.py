from __future__ import annotations

import logging

import pytest

from reportrunner.core.diagnostics import LoggingEmitter, NullEmitter, format_event_message
from reportrunner.core.exceptions import (
    EncoderError,
    ParameterConversionError,
    exception_hint,
    exception_messages,
)
from reportrunner.core.messages import get_message
from reportrunner.ui.cli.diagnostics import CliEmitter
from reportrunner.ui.cli.state import CLIState, RunSummary, set_cli_state


def _raise_nested_error() -> None:
    try:
        raise ValueError("invalid literal for int(): 'ten'")
    except ValueError as exc:
        raise ParameterConversionError("limit") from exc


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom", EncoderError("disk full"))
    assert any(record.message == "boom" and record.exc_info for record in caplog.records)
    assert emitter.debug_enabled is True


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.DEBUG):
        emitter.event("render_completed", {"target": "table/html;page", "page_count": 3})
        emitter.event("parameters_bound", {"parameters": ["region"]})
    messages = [record.getMessage() for record in caplog.records]
    assert "Rendered table/html;page, 3 page(s)" in messages
    assert any("parameters_bound" in message for message in messages)


@pytest.mark.parametrize(
    ("name", "payload", "expected"),
    [
        ("report_loaded", {"report": "sales", "source": "sales.yml"}, "Loaded report 'sales'"),
        ("target_resolved", {"target": "pageable/pdf"}, "Rendering to pageable/pdf"),
        ("printer_selected", {"printer": None}, "Sending report to printer <default>"),
        ("render_completed", {"target": "table/csv;stream", "page_count": -1}, "Rendered"),
    ],
)
def test_format_event_message(name: str, payload: dict[str, object], expected: str) -> None:
    message = format_event_message(name, payload)
    assert message is not None and message.startswith(expected)


def test_format_event_message_ignores_unknown_events() -> None:
    assert format_event_message("custom", {}) is None


def test_exception_hint_reports_root_cause() -> None:
    with pytest.raises(ParameterConversionError) as excinfo:
        _raise_nested_error()
    assert exception_messages(excinfo.value) == [
        "Unable to convert value for parameter 'limit'.",
        "invalid literal for int(): 'ten'",
    ]
    assert exception_hint(excinfo.value) == "invalid literal for int(): 'ten'"


def test_message_catalog_substitutes_parameters() -> None:
    assert get_message("unknown_output_target", target="x/y") == (
        "No encoder is available for output target 'x/y'."
    )
    assert get_message("no-such-key") == "no-such-key"


def test_cli_emitter_bridges_state(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=1, debug=False)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=EncoderError("disk full"))
    emitter.event("custom", {"flag": True})

    captured = capsys.readouterr()
    combined_output = f"{captured.out}\n{captured.err}"
    assert "Heads up" in combined_output
    assert "Boom disk full" in combined_output
    assert state.summary == RunSummary()


def test_cli_emitter_folds_lifecycle_events_into_summary() -> None:
    state = CLIState()
    emitter = CliEmitter(state=state)

    emitter.event("report_loaded", {"report": "sales", "source": "sales.yml"})
    emitter.event("target_resolved", {"target": "table/html;page", "output_type": "text/html"})

    assert state.summary.describe("out.html", 3) == (
        "Report written to out.html as table/html;page (3 page(s))"
    )
    assert state.summary.describe(None) is None


def test_run_summary_describes_print_jobs() -> None:
    state = CLIState()
    state.record_event("report_loaded", {"report": "sales"})
    state.record_event("printer_selected", {"printer": None})

    assert state.summary.describe(None) == "Report 'sales' sent to printer <default>"
