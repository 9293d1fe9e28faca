from __future__ import annotations

import csv
import io

import pytest
from openpyxl import load_workbook

from pdf_pagekit.exceptions import NoTableDetected
from pdf_pagekit.tables import SHEET_TITLE, TableExtractor, rows_to_csv, rows_to_xlsx


def test_wide_gaps_and_tabs_split_cells() -> None:
    rows = TableExtractor().extract([["Name   Age\tCity", "Ada  36  London"]])

    assert rows == [["Name", "Age", "City"], ["Ada", "36", "London"]]


def test_single_cell_lines_are_ignored() -> None:
    rows = TableExtractor().extract([["Heading", "a  b"], ["Footer text"]])

    assert rows == [["a", "b"]]


def test_runs_are_joined_per_page_in_order() -> None:
    rows = TableExtractor().extract([["x  1"], ["y  2", "z  3"]])

    assert rows == [["x", "1"], ["y", "2"], ["z", "3"]]


def test_single_run_line_has_no_table() -> None:
    with pytest.raises(NoTableDetected) as excinfo:
        TableExtractor().extract([["just one run of plain text"]])

    assert str(excinfo.value) == "No tables detected."


def test_empty_document_has_no_table() -> None:
    with pytest.raises(NoTableDetected):
        TableExtractor().extract([[], []])


def test_rows_to_csv_quotes_commas() -> None:
    text = rows_to_csv([["a", "b,c"], ["1", "2"]])

    assert list(csv.reader(io.StringIO(text))) == [["a", "b,c"], ["1", "2"]]


def test_rows_to_xlsx_uses_named_sheet() -> None:
    data = rows_to_xlsx([["Name", "Units"], ["Widget", "12"]])

    workbook = load_workbook(io.BytesIO(data))
    sheet = workbook[SHEET_TITLE]
    assert [[cell.value for cell in row] for row in sheet.iter_rows()] == [
        ["Name", "Units"],
        ["Widget", "12"],
    ]
