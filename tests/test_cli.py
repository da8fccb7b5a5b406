from __future__ import annotations

from pathlib import Path
from typing import IO, Any

import pytest
import typer
from typer.testing import CliRunner

from reportrunner.core.encoders import EncoderSet
from reportrunner.ui.cli import app
from reportrunner.ui.cli.commands.render import parse_param_options


DEFINITION = """\
name: sales
parameters:
  - name: region
    multi-select: true
data:
  columns: [region, amount]
  rows:
    - [EMEA, 120]
    - [APAC, 80]
    - [AMER, 95]
"""


@pytest.fixture
def definition(tmp_path: Path) -> Path:
    path = tmp_path / "sales.yml"
    path.write_text(DEFINITION, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _builtin_encoders_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(EncoderSet, "discover", classmethod(lambda cls, base=None: cls.builtin()))


def test_parse_param_options_groups_repeated_names() -> None:
    assert parse_param_options(["a=1", "b=x=y", "a=2", "a=3"]) == {
        "a": ["1", "2", "3"],
        "b": "x=y",
    }


def test_parse_param_options_rejects_missing_separator() -> None:
    with pytest.raises(typer.BadParameter):
        parse_param_options(["region"])


def test_render_csv_infers_type_from_extension(definition: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    output = tmp_path / "out" / "sales.csv"

    result = runner.invoke(app, ["render", str(definition), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == "region,amount\nEMEA,120\nAPAC,80\nAMER,95\n"


def test_render_to_stdout(definition: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["render", str(definition), "--output-type", "text/csv"])

    assert result.exit_code == 0, result.output
    assert "AMER,95" in result.stdout


def test_render_paginated_html(definition: Path, tmp_path: Path) -> None:
    config = tmp_path / "engine.yml"
    config.write_text("rows_per_page: 2\n", encoding="utf-8")
    output = tmp_path / "sales.html"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "render",
            str(definition),
            "-o",
            str(output),
            "--paginate",
            "--accepted-page",
            "1",
            "--config",
            str(config),
            "--param",
            "region=EMEA",
            "--param",
            "region=APAC",
        ],
    )

    assert result.exit_code == 0, result.output
    html = output.read_text(encoding="utf-8")
    assert 'data-page="1"' in html
    assert "AMER" in html
    assert "<dd>EMEA, APAC</dd>" in html


def test_render_unknown_target_exits_with_error(definition: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "render",
            str(definition),
            "-o",
            str(tmp_path / "sales.pdf"),
        ],
    )

    assert result.exit_code == 1
    assert "pageable/pdf" in result.output


def test_render_invalid_definition_exits_with_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yml"
    path.write_text("parameters: 12\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["render", str(path), "-t", "text/csv"])

    assert result.exit_code == 1
    assert "Invalid report definition" in result.output


def test_targets_lists_known_identifiers() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["targets"])

    assert result.exit_code == 0, result.output
    assert "table/csv;stream" in result.stdout
    assert "pageable/pdf" in result.stdout
    assert "installed" in result.stdout


class _WorkbookEncoder:
    def __init__(self) -> None:
        self.templates: list[bytes] = []

    def generate(
        self, report: Any, stream: IO[bytes], template: IO[bytes] | None, yield_rate: int
    ) -> bool:
        assert template is not None
        self.templates.append(template.read())
        stream.write(b"workbook:" + self.templates[-1])
        return True


def test_render_passes_workbook_template_as_binary_stream(
    definition: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    encoder = _WorkbookEncoder()
    monkeypatch.setattr(
        EncoderSet,
        "discover",
        classmethod(lambda cls, base=None: cls.builtin().with_encoders(xls=encoder)),
    )
    template = tmp_path / "template.xls"
    template.write_bytes(b"\xd0\xcf\x11\xe0template")
    output = tmp_path / "sales.xls"
    runner = CliRunner()

    result = runner.invoke(
        app, ["render", str(definition), "-o", str(output), "--workbook", str(template)]
    )

    assert result.exit_code == 0, result.output
    assert encoder.templates == [b"\xd0\xcf\x11\xe0template"]
    assert output.read_bytes() == b"workbook:\xd0\xcf\x11\xe0template"


def test_render_verbose_reports_written_file(definition: Path, tmp_path: Path) -> None:
    output = tmp_path / "sales.csv"
    runner = CliRunner()

    result = runner.invoke(app, ["render", str(definition), "-o", str(output), "-v"])

    assert result.exit_code == 0, result.output
    assert "Report written to" in result.output
