"""Reference encoders shipped with reportrunner.

CSV and HTML (streaming and paginated) are available out of the box. PDF,
RTF, spreadsheet, and e-mail encoders are provided by plugins registered
under the ``reportrunner.encoders`` entry-point group.
"""

from __future__ import annotations

from typing import Any

from .csv_output import CsvEncoder
from .html_output import HtmlEncoder, HtmlFormatter, PagedHtmlEncoder


def builtin_encoders() -> dict[str, Any]:
    """Return the built-in encoders keyed by ``EncoderSet`` slot."""
    formatter = HtmlFormatter()
    return {
        "csv": CsvEncoder(),
        "html": HtmlEncoder(formatter),
        "paged_html": PagedHtmlEncoder(formatter),
    }


__all__ = [
    "CsvEncoder",
    "HtmlEncoder",
    "HtmlFormatter",
    "PagedHtmlEncoder",
    "builtin_encoders",
]
