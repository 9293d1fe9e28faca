"""Best-effort table detection from page text runs."""

from __future__ import annotations

import csv
import io
import re
from typing import Iterable, List, Sequence

from openpyxl import Workbook

from .exceptions import NoTableDetected

SHEET_TITLE = "ExtractedTable"

_CELL_SPLIT_RE = re.compile(r"\s{2,}|\t")

Row = List[str]


class TableExtractor:
    """Split text lines into cells on wide whitespace gaps.

    A line becomes a row when it yields at least ``min_cells`` non-empty
    cells. No column alignment is attempted.
    """

    def __init__(self, min_cells: int = 2) -> None:
        self.min_cells = min_cells

    def split_line(self, line: str) -> Row:
        return [cell.strip() for cell in _CELL_SPLIT_RE.split(line) if cell.strip()]

    def extract(self, pages_text: Iterable[Sequence[str]]) -> List[Row]:
        rows: List[Row] = []
        for runs in pages_text:
            for line in "\n".join(runs).splitlines():
                cells = self.split_line(line)
                if len(cells) >= self.min_cells:
                    rows.append(cells)

        if not rows:
            raise NoTableDetected()
        return rows


def rows_to_csv(rows: Sequence[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def rows_to_xlsx(rows: Sequence[Sequence[str]]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    for row in rows:
        sheet.append(list(row))

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["TableExtractor", "rows_to_csv", "rows_to_xlsx", "SHEET_TITLE"]
