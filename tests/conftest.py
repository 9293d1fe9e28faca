from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter
from reportlab.pdfgen import canvas

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_pagekit import PageToolkit  # noqa: E402


def _write(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def toolkit() -> PageToolkit:
    return PageToolkit()


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    def _create(
        pages: int = 1,
        width: float = 72,
        height: float = 72,
        title: str | None = None,
    ) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=width, height=height)
        if title is not None:
            writer.add_metadata({"/Title": title})
        return _write(writer)

    return _create


@pytest.fixture()
def sample_bytes() -> bytes:
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "pdf-pagekit-tests", "/Title": "Sample"})
    return _write(writer)


@pytest.fixture()
def sample_pdf(tmp_path: Path, sample_bytes: bytes) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(sample_bytes)
    return pdf_path


@pytest.fixture()
def text_pdf_factory() -> Callable[[Sequence[Sequence[str]]], bytes]:
    """Build a PDF with one page per entry, drawing each line top to bottom."""

    def _create(pages: Sequence[Sequence[str]], width: float = 300, height: float = 200) -> bytes:
        buffer = io.BytesIO()
        pdf_canvas = canvas.Canvas(buffer, pagesize=(width, height))
        for lines in pages:
            pdf_canvas.setFont("Helvetica", 12)
            y = height - 30
            for line in lines:
                pdf_canvas.drawString(20, y, line)
                y -= 20
            pdf_canvas.showPage()
        pdf_canvas.save()
        return buffer.getvalue()

    return _create


@pytest.fixture()
def table_pdf(text_pdf_factory: Callable[..., bytes]) -> bytes:
    return text_pdf_factory(
        [
            ["Quarterly report", "Name  Units  Region", "Widget  12  North"],
            ["Gadget  7  South", "End of report"],
        ]
    )


@pytest.fixture()
def form_pdf() -> bytes:
    buffer = io.BytesIO()
    pdf_canvas = canvas.Canvas(buffer, pagesize=(300, 200))
    pdf_canvas.drawString(20, 170, "Registration")
    pdf_canvas.acroForm.textfield(name="name", x=20, y=120, width=200, height=20)
    pdf_canvas.acroForm.textfield(name="email", x=20, y=80, width=200, height=20, value="old@example.com")
    pdf_canvas.showPage()
    pdf_canvas.save()
    return buffer.getvalue()


@pytest.fixture()
def png_factory() -> Callable[..., bytes]:
    def _create(width: int = 120, height: int = 80, color: str = "red") -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _create
