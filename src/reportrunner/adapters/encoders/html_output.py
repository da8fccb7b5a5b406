"""HTML output rendered with Jinja2, as one stream or as logical pages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math
from pathlib import Path
from typing import IO, Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reportrunner.core.engine import get_engine_config
from reportrunner.core.exceptions import EncoderError
from reportrunner.core.model import ReportModel
from reportrunner.core.repository import ContentRepository

from ._common import format_value, paced, parameter_rows, report_table


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
STYLESHEET_NAME = "report.css"


@dataclass(slots=True)
class HtmlPage:
    number: int
    rows: list[list[str]]


class HtmlFormatter:
    """Render report pages through the bundled ``report.html`` template."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR, encoding: str = "utf-8") -> None:
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template_dir = template_dir
        self.encoding = encoding

    @property
    def stylesheet(self) -> str:
        return (self.template_dir / STYLESHEET_NAME).read_text(encoding="utf-8")

    def publish_stylesheet(self, repository: ContentRepository, pattern: str | None) -> str:
        """Store the stylesheet in ``repository`` and return the href naming it."""
        repository.store(STYLESHEET_NAME, self.stylesheet.encode("utf-8"), "text/css")
        return (pattern or "{0}").format(STYLESHEET_NAME)

    def write(
        self,
        report: ReportModel,
        stream: IO[bytes],
        pages: Sequence[HtmlPage],
        columns: Sequence[str],
        *,
        stylesheet_href: str | None = None,
    ) -> None:
        template = self.env.get_template("report.html")
        html = template.render(
            title=report.name,
            parameters=parameter_rows(report),
            columns=list(columns),
            pages=list(pages),
            stylesheet=None if stylesheet_href else self.stylesheet,
            stylesheet_href=stylesheet_href,
        )
        stream.write(html.encode(self.encoding))


def _format_rows(rows: Sequence[Sequence[Any]], yield_rate: int) -> list[list[str]]:
    return [[format_value(cell) for cell in row] for row in paced(rows, yield_rate)]


class HtmlEncoder:
    """Render the whole report into a single HTML document."""

    def __init__(self, formatter: HtmlFormatter | None = None) -> None:
        self.formatter = formatter or HtmlFormatter()

    def _render(
        self,
        report: ReportModel,
        stream: IO[bytes],
        yield_rate: int,
        stylesheet_href: str | None,
    ) -> bool:
        table = report_table(report)
        page = HtmlPage(number=0, rows=_format_rows(table.rows, yield_rate))
        self.formatter.write(
            report, stream, [page], table.columns, stylesheet_href=stylesheet_href
        )
        return True

    def generate(
        self,
        report: ReportModel,
        stream: IO[bytes],
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> bool:
        return self._render(report, stream, yield_rate, None)

    def generate_to_repository(
        self,
        session: Any,
        report: ReportModel,
        stream: IO[bytes],
        repository: ContentRepository,
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> bool:
        href = self.formatter.publish_stylesheet(repository, content_handler_pattern)
        return self._render(report, stream, yield_rate, href)


class PagedHtmlEncoder:
    """Split report rows into logical pages and render one or all of them."""

    def __init__(
        self,
        formatter: HtmlFormatter | None = None,
        *,
        rows_per_page: int | None = None,
    ) -> None:
        self.formatter = formatter or HtmlFormatter()
        self.rows_per_page = rows_per_page

    def paginate(self, rows: Sequence[Sequence[Any]]) -> list[Sequence[Sequence[Any]]]:
        size = self.rows_per_page or get_engine_config().rows_per_page
        count = max(1, math.ceil(len(rows) / size))
        return [rows[index * size : (index + 1) * size] for index in range(count)]

    def _render(
        self,
        report: ReportModel,
        accepted_page: int,
        stream: IO[bytes],
        yield_rate: int,
        stylesheet_href: str | None,
    ) -> int:
        table = report_table(report)
        chunks = self.paginate(table.rows)
        if accepted_page >= len(chunks):
            raise EncoderError(
                f"Page {accepted_page} is out of range; the report has {len(chunks)} page(s)."
            )
        if accepted_page < 0:
            selected = list(enumerate(chunks))
        else:
            selected = [(accepted_page, chunks[accepted_page])]
        pages = [HtmlPage(number, _format_rows(rows, yield_rate)) for number, rows in selected]
        self.formatter.write(
            report, stream, pages, table.columns, stylesheet_href=stylesheet_href
        )
        return len(chunks)

    def generate(
        self,
        report: ReportModel,
        accepted_page: int,
        stream: IO[bytes],
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> int:
        return self._render(report, accepted_page, stream, yield_rate, None)

    def generate_to_repository(
        self,
        session: Any,
        report: ReportModel,
        accepted_page: int,
        stream: IO[bytes],
        repository: ContentRepository,
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> int:
        href = self.formatter.publish_stylesheet(repository, content_handler_pattern)
        return self._render(report, accepted_page, stream, yield_rate, href)


__all__ = ["HtmlEncoder", "HtmlFormatter", "HtmlPage", "PagedHtmlEncoder"]
