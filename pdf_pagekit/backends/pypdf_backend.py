"""pypdf codec implementation for PDF PageKit.

Structural work (copy, rotate, boxes, encryption) goes through ``pypdf``.
Text and image drawing is done by rendering a one-page ``reportlab`` overlay
sized to the target page and merging it on top.
"""

from __future__ import annotations

import io
from typing import Any, Callable, Dict, List, Optional, Sequence

from PIL import Image, UnidentifiedImageError
from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.errors import PdfReadError
from pypdf.generic import NameObject, RectangleObject, DictionaryObject
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..document import Document
from ..exceptions import DecodeError, WrongPassword
from ..types import PageGeometry
from ..utils import get_logger
from .base import Color, DocumentCodec, RasterImage

LOGGER = get_logger("pdf_pagekit.codec")

PRODUCER = "PDF PageKit"

_STALE_BOXES = ("/BleedBox", "/ArtBox")


def _metadata_dict(reader: PdfReader) -> Dict[str, str]:
    metadata = reader.metadata
    if not metadata:
        return {}
    return {
        key: str(value)
        for key, value in metadata.items()
        if isinstance(key, str) and value is not None
    }


class PypdfCodec(DocumentCodec):
    """Codec that uses ``pypdf`` under the hood."""

    def open(self, data: bytes, password: Optional[str] = None) -> Document:
        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise DecodeError(f"Corrupted or invalid PDF file. Error: {exc}") from exc
        except Exception as exc:
            raise DecodeError(f"Unexpected error reading PDF. Error: {exc}") from exc

        was_encrypted = bool(reader.is_encrypted)
        if was_encrypted:
            self._decrypt(reader, password)

        try:
            num_pages = len(reader.pages)
        except Exception as exc:
            raise DecodeError(f"Unable to read PDF page tree. Error: {exc}") from exc
        if num_pages == 0:
            raise DecodeError("PDF has no pages.")

        writer = PdfWriter()
        try:
            writer.clone_document_from_reader(reader)
        except Exception as exc:
            raise DecodeError(f"Unable to copy PDF structure. Error: {exc}") from exc

        LOGGER.debug("Opened PDF with %d page(s), encrypted=%s", num_pages, was_encrypted)
        return Document(
            writer=writer,
            file_size=len(data),
            was_encrypted=was_encrypted,
            metadata=_metadata_dict(reader),
        )

    @staticmethod
    def _decrypt(reader: PdfReader, password: Optional[str]) -> None:
        if password is None:
            # Owner-password-only files open with an empty user password.
            try:
                status = reader.decrypt("")
            except Exception:
                status = 0
            if status == 0:
                raise DecodeError("PDF is encrypted. Supply a password to process this file.")
            return

        try:
            status = reader.decrypt(password)
        except Exception as exc:
            raise DecodeError(f"Unable to decrypt PDF. Error: {exc}") from exc
        if status == 0:
            raise WrongPassword("Failed to decrypt PDF with supplied password.")

    def new_document(self) -> Document:
        writer = PdfWriter()
        writer.add_metadata({"/Producer": PRODUCER})
        return Document(writer=writer, metadata={"/Producer": PRODUCER})

    def copy_pages(self, dest: Document, src: Document, indices: Sequence[int]) -> List[PageObject]:
        return [dest.writer.add_page(src.get_page(index)) for index in indices]

    def add_blank_page(self, dest: Document, width: float, height: float) -> PageObject:
        return dest.writer.add_blank_page(width=width, height=height)

    def save(
        self,
        document: Document,
        *,
        user_password: Optional[str] = None,
        owner_password: Optional[str] = None,
    ) -> bytes:
        writer = document.writer
        if user_password is not None or owner_password is not None:
            writer.encrypt(
                user_password=user_password or "",
                owner_password=owner_password or user_password,
            )
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Page geometry
    # ------------------------------------------------------------------
    def page_geometry(self, page: PageObject) -> PageGeometry:
        box = page.cropbox
        return PageGeometry(
            width=float(box.width),
            height=float(box.height),
            left=float(box.left),
            bottom=float(box.bottom),
            rotation=int(page.rotation) % 360,
        )

    def set_rotation(self, page: PageObject, degrees: int) -> None:
        page.rotation = int(degrees) % 360

    def set_visible_box(self, page: PageObject, left: float, bottom: float, right: float, top: float) -> None:
        page.mediabox = RectangleObject((left, bottom, right, top))
        page.cropbox = RectangleObject((left, bottom, right, top))
        page.trimbox = RectangleObject((left, bottom, right, top))
        for key in _STALE_BOXES:
            if key in page:
                del page[key]

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def embed_raster(self, image_bytes: bytes) -> RasterImage:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                width, height = image.size
                image_format = (image.format or "PNG").lower()
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(f"Unsupported raster image. Error: {exc}") from exc
        return RasterImage(data=image_bytes, width=width, height=height, image_format=image_format)

    def draw_image(
        self,
        page: PageObject,
        image: RasterImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        def _draw(pdf_canvas: canvas.Canvas) -> None:
            pdf_canvas.drawImage(ImageReader(io.BytesIO(image.data)), x, y, width=width, height=height)

        self._stamp(page, _draw)

    def draw_text(
        self,
        page: PageObject,
        text: str,
        *,
        x: float,
        y: float,
        size: float,
        font: str = "Helvetica",
        opacity: float = 1.0,
        rotate_degrees: float = 0,
        color: Color = (0, 0, 0),
        centered: bool = False,
    ) -> None:
        def _draw(pdf_canvas: canvas.Canvas) -> None:
            pdf_canvas.saveState()
            pdf_canvas.setFillColorRGB(*color)
            pdf_canvas.setFillAlpha(opacity)
            pdf_canvas.setFont(font, size)
            pdf_canvas.translate(x, y)
            if rotate_degrees:
                pdf_canvas.rotate(rotate_degrees)
            if centered:
                # drop the baseline so the glyphs sit on the anchor point
                pdf_canvas.drawCentredString(0, -size * 0.35, text)
            else:
                pdf_canvas.drawString(0, 0, text)
            pdf_canvas.restoreState()

        self._stamp(page, _draw)

    def text_width(self, text: str, size: float, font: str = "Helvetica") -> float:
        return float(pdfmetrics.stringWidth(text, font, size))

    def clear_contents(self, page: PageObject) -> None:
        for key in ("/Contents", "/Annots"):
            if key in page:
                del page[key]
        page[NameObject("/Resources")] = DictionaryObject()

    def replace_with_raster(self, page: PageObject, image_bytes: bytes, width: float, height: float) -> None:
        image = self.embed_raster(image_bytes)
        self.clear_contents(page)
        self.set_rotation(page, 0)
        self.set_visible_box(page, 0, 0, width, height)
        self.draw_image(page, image, 0, 0, width, height)

    def text_runs(self, page: PageObject) -> List[str]:
        runs: List[str] = []

        def _visit(text: str, *_: Any) -> None:
            if text and text.strip():
                runs.append(text.strip())

        page.extract_text(visitor_text=_visit)
        return runs

    def _stamp(self, page: PageObject, draw_fn: Callable[[canvas.Canvas], None]) -> None:
        geometry = self.page_geometry(page)
        overlay = self._build_overlay(geometry.width, geometry.height, draw_fn)
        page.merge_transformed_page(
            overlay,
            Transformation().translate(geometry.left, geometry.bottom),
        )

    @staticmethod
    def _build_overlay(
        width: float,
        height: float,
        draw_fn: Callable[[canvas.Canvas], None],
    ) -> PageObject:
        buffer = io.BytesIO()
        pdf_canvas = canvas.Canvas(buffer, pagesize=(width, height))
        draw_fn(pdf_canvas)
        pdf_canvas.showPage()
        pdf_canvas.save()
        return PdfReader(io.BytesIO(buffer.getvalue())).pages[0]


def page_to_pdf_bytes(page: PageObject) -> bytes:
    """Serialize a single page as a standalone PDF."""

    writer = PdfWriter()
    writer.add_page(page)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


__all__ = ["PypdfCodec", "page_to_pdf_bytes", "PRODUCER"]
