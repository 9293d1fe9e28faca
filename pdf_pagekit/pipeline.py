"""Per-page transform pipeline."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence, Type

from .backends.base import DocumentCodec, Rasterizer
from .config import EngineConfig
from .exceptions import DegenerateCropBox
from .transforms import (
    Crop,
    PageNumber,
    RedactionMask,
    Rotate,
    TransformSpec,
    Watermark,
    validate_transforms,
)
from .utils import get_logger, mm_to_points

LOGGER = get_logger("pdf_pagekit.pipeline")

WATERMARK_GRAY = (0.5, 0.5, 0.5)
WATERMARK_ANGLE = 45
PAGE_NUMBER_SIDE_MARGIN = 30
PAGE_NUMBER_EDGE_MARGIN = 10


class PageTransformPipeline:
    """Apply an ordered list of transforms to one page in place.

    The whole list is validated before the page is touched. Each transform
    re-reads the page geometry, so a crop narrows the area later watermark
    and page-number transforms are placed in.
    """

    def __init__(
        self,
        codec: DocumentCodec,
        rasterizer: Rasterizer,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.codec = codec
        self.rasterizer = rasterizer
        self.config = config or EngineConfig()
        self._handlers: Dict[Type[Any], Callable[[Any, Any, int], None]] = {
            Rotate: self._rotate,
            Crop: self._crop,
            Watermark: self._watermark,
            PageNumber: self._page_number,
            RedactionMask: self._redact,
        }

    def apply(self, page: Any, transforms: Sequence[TransformSpec], *, index: int = 0) -> None:
        for spec in validate_transforms(transforms):
            LOGGER.debug("Applying %s to page index %d", spec.kind, index)
            self._handlers[type(spec)](page, spec, index)

    def _rotate(self, page: Any, spec: Rotate, index: int) -> None:
        current = self.codec.page_geometry(page).rotation
        self.codec.set_rotation(page, (current + int(spec.angle)) % 360)

    def _crop(self, page: Any, spec: Crop, index: int) -> None:
        if not spec.apply_to_all_pages and index != 0:
            return
        if spec.is_noop:
            return

        geometry = self.codec.page_geometry(page)
        top = mm_to_points(spec.top)
        right = mm_to_points(spec.right)
        bottom = mm_to_points(spec.bottom)
        left = mm_to_points(spec.left)

        new_width = geometry.width - left - right
        new_height = geometry.height - top - bottom
        if new_width <= 0 or new_height <= 0:
            raise DegenerateCropBox(
                f"Crop margins leave a {new_width:.1f}x{new_height:.1f} pt box "
                f"on a {geometry.width:.1f}x{geometry.height:.1f} pt page."
            )

        self.codec.set_visible_box(
            page,
            geometry.left + left,
            geometry.bottom + bottom,
            geometry.left + geometry.width - right,
            geometry.bottom + geometry.height - top,
        )

    def _watermark(self, page: Any, spec: Watermark, index: int) -> None:
        if not spec.text:
            return

        geometry = self.codec.page_geometry(page)
        self.codec.draw_text(
            page,
            spec.text,
            x=geometry.width / 2,
            y=geometry.height / 2,
            size=min(geometry.width, geometry.height) / 10,
            opacity=spec.opacity,
            rotate_degrees=WATERMARK_ANGLE,
            color=WATERMARK_GRAY,
            centered=True,
        )

    def _page_number(self, page: Any, spec: PageNumber, index: int) -> None:
        geometry = self.codec.page_geometry(page)
        text = spec.label(index)

        if spec.position == "top":
            y = geometry.height - spec.font_size - PAGE_NUMBER_EDGE_MARGIN
        else:
            y = PAGE_NUMBER_EDGE_MARGIN

        if spec.align == "left":
            x = PAGE_NUMBER_SIDE_MARGIN
        elif spec.align == "right":
            x = geometry.width - PAGE_NUMBER_SIDE_MARGIN
        else:
            x = geometry.width / 2 - self.codec.text_width(text, spec.font_size) / 2

        self.codec.draw_text(page, text, x=x, y=y, size=spec.font_size)

    def _redact(self, page: Any, spec: RedactionMask, index: int) -> None:
        scale = spec.scale or self.config.preview_scale
        with self.rasterizer.rendered_page(page, scale) as surface:
            self.rasterizer.fill_rectangles(surface, (rect.normalized() for rect in spec.rectangles))
            pixel_width, pixel_height = surface.size
            image_bytes = self.rasterizer.encode_surface(surface, "png")

        self.codec.replace_with_raster(
            page,
            image_bytes,
            pixel_width / scale,
            pixel_height / scale,
        )


__all__ = ["PageTransformPipeline"]
