"""PyMuPDF rasterizer producing Pillow surfaces."""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image, ImageDraw
from pypdf import PageObject

from ..exceptions import DecodeError
from .base import Rasterizer
from .pypdf_backend import page_to_pdf_bytes

_FORMATS = {"png": "PNG", "jpeg": "JPEG", "jpg": "JPEG"}


def _jpeg_quality(quality: Optional[float]) -> int:
    if quality is None:
        return 90
    return max(1, min(95, int(round(quality * 100))))


class PyMuPDFRasterizer(Rasterizer):
    """Render pages with PyMuPDF and composite them with Pillow."""

    def render_page_to_surface(self, page: PageObject, scale: float) -> Image.Image:
        if scale <= 0:
            raise ValueError("Render scale must be positive")

        try:
            document = fitz.open(stream=page_to_pdf_bytes(page), filetype="pdf")
        except Exception as exc:
            raise DecodeError(f"Unable to render page. Error: {exc}") from exc

        try:
            pixmap = document[0].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)
        finally:
            document.close()

    @contextmanager
    def rendered_page(self, page: PageObject, scale: float) -> Iterator[Image.Image]:
        surface = self.render_page_to_surface(page, scale)
        try:
            yield surface
        finally:
            surface.close()

    def encode_surface(
        self,
        surface: Image.Image,
        image_format: str = "png",
        quality: Optional[float] = None,
    ) -> bytes:
        pil_format = _FORMATS.get(image_format.lower())
        if pil_format is None:
            raise ValueError(f"Unsupported image format: {image_format}")

        buffer = io.BytesIO()
        if pil_format == "JPEG":
            surface.convert("RGB").save(buffer, format="JPEG", quality=_jpeg_quality(quality), optimize=True)
        else:
            surface.save(buffer, format="PNG")
        return buffer.getvalue()

    def fill_rectangles(
        self,
        surface: Image.Image,
        rectangles: Iterable[Tuple[float, float, float, float]],
    ) -> None:
        draw = ImageDraw.Draw(surface)
        for x0, y0, x1, y1 in rectangles:
            draw.rectangle((x0, y0, x1, y1), fill=(0, 0, 0))


__all__ = ["PyMuPDFRasterizer"]
