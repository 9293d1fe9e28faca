"""Backend protocols for document decoding and page rasterization."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

from ..document import Document
from ..types import PageGeometry

Color = Tuple[float, float, float]


@dataclass(frozen=True)
class RasterImage:
    """Encoded raster ready to be drawn on a page."""

    data: bytes
    width: int
    height: int
    image_format: str


class DocumentCodec(Protocol):
    """Protocol defining structural PDF operations."""

    def open(self, data: bytes, password: Optional[str] = None) -> Document:
        """Decode ``data`` into a working document."""

    def new_document(self) -> Document:
        """Return an empty working document."""

    def copy_pages(self, dest: Document, src: Document, indices: Sequence[int]) -> List[Any]:
        """Copy pages ``indices`` of ``src`` to the end of ``dest`` in the given order."""

    def add_blank_page(self, dest: Document, width: float, height: float) -> Any:
        """Append an empty page of the given size."""

    def save(
        self,
        document: Document,
        *,
        user_password: Optional[str] = None,
        owner_password: Optional[str] = None,
    ) -> bytes:
        """Serialize ``document`` to bytes."""

    def page_geometry(self, page: Any) -> PageGeometry:
        """Return the visible geometry of ``page``."""

    def set_rotation(self, page: Any, degrees: int) -> None:
        """Set the absolute display rotation of ``page``."""

    def set_visible_box(self, page: Any, left: float, bottom: float, right: float, top: float) -> None:
        """Restrict the visible area of ``page``."""

    def embed_raster(self, image_bytes: bytes) -> RasterImage:
        """Prepare encoded image bytes for drawing."""

    def draw_image(self, page: Any, image: RasterImage, x: float, y: float, width: float, height: float) -> None:
        """Draw ``image`` on ``page`` in page-space coordinates."""

    def draw_text(
        self,
        page: Any,
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
        """Draw ``text`` on ``page`` in page-space coordinates."""

    def text_width(self, text: str, size: float, font: str = "Helvetica") -> float:
        """Return the rendered width of ``text``."""

    def clear_contents(self, page: Any) -> None:
        """Remove every visible content of ``page``."""

    def replace_with_raster(self, page: Any, image_bytes: bytes, width: float, height: float) -> None:
        """Make an encoded raster the sole content of ``page``."""

    def text_runs(self, page: Any) -> List[str]:
        """Return the text runs of ``page`` in content-stream order."""


class Rasterizer(Protocol):
    """Protocol defining page rendering to pixel surfaces."""

    def render_page_to_surface(self, page: Any, scale: float) -> Any:
        """Render ``page`` to a pixel surface owned by the caller."""

    def rendered_page(self, page: Any, scale: float) -> AbstractContextManager[Any]:
        """Render ``page`` and release the surface when the block exits."""

    def encode_surface(self, surface: Any, image_format: str = "png", quality: Optional[float] = None) -> bytes:
        """Encode a surface as PNG or JPEG bytes."""

    def fill_rectangles(self, surface: Any, rectangles: Iterable[Tuple[float, float, float, float]]) -> None:
        """Paint opaque black blocks on ``surface``."""
