from __future__ import annotations

import pytest

from reportrunner.core.config import ExecutionConfig
from reportrunner.core.model import (
    CORE_NAMESPACE,
    LOCK_PREFERRED_OUTPUT_TYPE,
    PREFERRED_OUTPUT_TYPE,
    ReportModel,
)
from reportrunner.core.targets import (
    MIME_TYPE_CSV,
    MIME_TYPE_EMAIL,
    MIME_TYPE_HTML,
    MIME_TYPE_PDF,
    MIME_TYPE_RTF,
    MIME_TYPE_XLS,
    OutputTarget,
    effective_output_type,
    mime_type_from_extension,
    resolve_output_target,
)


def _report(preferred: str | None = None, *, locked: bool = False) -> ReportModel:
    report = ReportModel()
    report.set_attribute(CORE_NAMESPACE, PREFERRED_OUTPUT_TYPE, preferred)
    if locked:
        report.set_attribute(CORE_NAMESPACE, LOCK_PREFERRED_OUTPUT_TYPE, True)
    return report


@pytest.mark.parametrize(
    ("output_type", "paginate", "preferred"),
    [
        (MIME_TYPE_CSV, False, None),
        (MIME_TYPE_HTML, True, "pdf"),
        (None, False, "table/rtf;flow"),
    ],
)
def test_explicit_target_is_returned_verbatim(
    output_type: str | None, paginate: bool, preferred: str | None
) -> None:
    config = ExecutionConfig(output_type=output_type, paginate=paginate, output_target="custom/x")
    resolution = resolve_output_target(_report(preferred), config)
    assert resolution.target == "custom/x"
    assert not resolution.known


@pytest.mark.parametrize(
    ("output_type", "expected"),
    [
        (MIME_TYPE_CSV, OutputTarget.CSV),
        (MIME_TYPE_PDF, OutputTarget.PDF),
        (MIME_TYPE_RTF, OutputTarget.RTF),
        (MIME_TYPE_XLS, OutputTarget.XLS),
        (MIME_TYPE_EMAIL, OutputTarget.EMAIL),
    ],
)
def test_mime_types_map_to_targets(output_type: str, expected: OutputTarget) -> None:
    config = ExecutionConfig(output_type=output_type)
    assert resolve_output_target(_report(), config).target is expected


def test_html_honours_pagination() -> None:
    paged = ExecutionConfig(output_type=MIME_TYPE_HTML, paginate=True)
    streamed = ExecutionConfig(output_type=MIME_TYPE_HTML, paginate=False)
    assert resolve_output_target(_report(), paged).target is OutputTarget.HTML_PAGE
    assert resolve_output_target(_report(), streamed).target is OutputTarget.HTML_STREAM


def test_resolution_is_idempotent() -> None:
    report = _report("table/csv;stream")
    config = ExecutionConfig(output_type="application/unknown")
    assert resolve_output_target(report, config) == resolve_output_target(report, config)


def test_locked_preference_overrides_requested_type() -> None:
    config = ExecutionConfig(output_type=MIME_TYPE_CSV)
    resolution = resolve_output_target(_report("xls", locked=True), config)
    assert resolution.target is OutputTarget.XLS
    assert resolution.output_type == MIME_TYPE_XLS


def test_locked_preference_without_mime_match_is_used_verbatim() -> None:
    report = _report("table/csv;stream", locked=True)
    assert effective_output_type(report, MIME_TYPE_PDF) == "table/csv;stream"
    resolution = resolve_output_target(report, ExecutionConfig(output_type=MIME_TYPE_PDF))
    assert resolution.target is OutputTarget.CSV


def test_unlocked_preference_does_not_override_request() -> None:
    report = _report("xls")
    resolution = resolve_output_target(report, ExecutionConfig(output_type=MIME_TYPE_PDF))
    assert resolution.target is OutputTarget.PDF


def test_explicit_target_still_wins_over_lock() -> None:
    config = ExecutionConfig(output_type=MIME_TYPE_CSV, output_target="pageable/pdf")
    resolution = resolve_output_target(_report("xls", locked=True), config)
    assert resolution.target is OutputTarget.PDF
    assert resolution.output_type == MIME_TYPE_XLS


def test_unmapped_type_falls_back_to_preferred_target() -> None:
    config = ExecutionConfig(output_type="text/plain")
    resolution = resolve_output_target(_report("table/excel;flow"), config)
    assert resolution.target is OutputTarget.XLS


def test_unknown_preferred_target_is_kept_as_text() -> None:
    resolution = resolve_output_target(_report("table/odf;flow"), ExecutionConfig())
    assert resolution.target == "table/odf;flow"
    assert not resolution.known


def test_default_is_streaming_html() -> None:
    assert resolve_output_target(_report(), ExecutionConfig()).target is OutputTarget.HTML_STREAM


@pytest.mark.parametrize(
    ("extension", "expected"),
    [("csv", MIME_TYPE_CSV), (".HTML", MIME_TYPE_HTML), ("xls", MIME_TYPE_XLS), ("", None)],
)
def test_mime_type_from_extension(extension: str, expected: str | None) -> None:
    assert mime_type_from_extension(extension) == expected
