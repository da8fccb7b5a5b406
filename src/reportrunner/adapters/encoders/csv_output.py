"""Comma-separated output."""

from __future__ import annotations

import csv
import io
from typing import IO

from reportrunner.core.model import ReportModel

from ._common import format_value, paced, report_table


class CsvEncoder:
    """Write the report table as CSV, header row first."""

    def __init__(self, *, delimiter: str = ",", encoding: str = "utf-8") -> None:
        self.delimiter = delimiter
        self.encoding = encoding

    def generate(self, report: ReportModel, stream: IO[bytes], yield_rate: int) -> bool:
        table = report_table(report)
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")

        def flush() -> None:
            stream.write(buffer.getvalue().encode(self.encoding))
            buffer.seek(0)
            buffer.truncate()

        writer.writerow(table.columns)
        flush()
        for row in paced(table.rows, yield_rate):
            writer.writerow([format_value(cell) for cell in row])
            flush()
        return True


__all__ = ["CsvEncoder"]
