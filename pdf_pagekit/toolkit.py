"""High-level PDF PageKit operations.

:class:`PageToolkit` is the entry point most callers want. Every method takes
raw bytes, runs one operation inside :func:`~pdf_pagekit.utils.operation_scope`
and returns :class:`~pdf_pagekit.types.OutputFile` values (or plain data for
inspection methods). Documents are never shared between calls.

Quick Start:
    >>> from pdf_pagekit import PageToolkit
    >>> toolkit = PageToolkit()
    >>> files = toolkit.split(data, method="range", value="1-3,5")
"""

from __future__ import annotations

import html
import io
import threading
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from pptx import Presentation
from pptx.util import Inches
from reportlab.lib.pagesizes import A4, landscape, letter, portrait

from .backends.base import DocumentCodec, Rasterizer
from .backends.pymupdf_rasterizer import PyMuPDFRasterizer
from .backends.pypdf_backend import PypdfCodec
from .config import EngineConfig
from .document import Document
from .exceptions import InvalidTransformParameters, OutOfBounds
from .forms import fill_form, list_form_fields
from .pipeline import PageTransformPipeline
from .planner import SplitPlanner
from .ranges import RangeParser, format_ranges
from .reassembler import MERGE_ALL, DocumentReassembler, ReassembledDocument, ReassemblyMode
from .security import protect_pdf, unprotect_pdf
from .tables import TableExtractor, rows_to_csv, rows_to_xlsx
from .transforms import (
    Crop,
    PageNumber,
    RedactionMask,
    RedactionRect,
    Rotate,
    TransformSpec,
    Watermark,
    validate_transforms,
)
from .types import (
    Each,
    Explicit,
    FieldValues,
    FixedChunk,
    FormField,
    OutputFile,
    PDFInfo,
    RasterOptions,
    SplitPolicy,
)
from .utils import get_logger, mm_to_points, operation_scope

LOGGER = get_logger("pdf_pagekit")

PAGE_SIZES = {"a4": A4, "letter": letter}
SPLIT_METHODS = ("each", "pages", "range")
NO_DIFFERENCES = "No differences found."

SLIDE_WIDTH = Inches(10)
SLIDE_HEIGHT = Inches(7.5)
SLIDE_RENDER_SCALE = 2.0
BLANK_SLIDE_LAYOUT = 6
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

ProgressCallback = Callable[[int, int], None]
RectLike = Union[RedactionRect, Tuple[float, float, float, float]]


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class PageToolkit:
    """Run page-level operations on PDF bytes.

    Args:
        config: Engine settings; defaults to :class:`EngineConfig` defaults
        codec: Structural PDF backend; defaults to :class:`PypdfCodec`
        rasterizer: Page renderer; defaults to :class:`PyMuPDFRasterizer`
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        codec: Optional[DocumentCodec] = None,
        rasterizer: Optional[Rasterizer] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.codec = codec or PypdfCodec()
        self.rasterizer = rasterizer or PyMuPDFRasterizer()
        self.pipeline = PageTransformPipeline(self.codec, self.rasterizer, self.config)
        self.reassembler = DocumentReassembler(self.codec, self.rasterizer, self.pipeline)
        self.planner = SplitPlanner(default_chunk_size=self.config.default_chunk_size)
        self.range_parser = RangeParser(strict=self.config.strict_ranges)
        self.table_extractor = TableExtractor()
        get_logger("pdf_pagekit", self.config.log_level)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _save(self, reassembled: ReassembledDocument) -> OutputFile:
        return OutputFile(reassembled.name, self.codec.save(reassembled.document))

    def _transform_all(
        self,
        data: bytes,
        transforms: Sequence[TransformSpec],
        name: str,
        *,
        password: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OutputFile:
        checked = validate_transforms(transforms)
        document = self.codec.open(data, password=password)
        (result,) = self.reassembler.reassemble(
            [document],
            MERGE_ALL,
            ReassemblyMode.STRUCTURAL,
            checked,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
        )
        result.name = name
        return self._save(result)

    def _page_texts(self, document: Document) -> List[str]:
        return [" ".join(self.codec.text_runs(page)) for page in document.iter_pages()]

    def _policy_for(self, method: str, value: Optional[str], page_count: int) -> SplitPolicy:
        if method == "each":
            return Each()
        if method == "pages":
            try:
                size = int(str(value).strip())
            except (TypeError, ValueError):
                size = None
            return FixedChunk(size)
        if method == "range":
            ranges = self.range_parser.parse(value, page_count)
            LOGGER.info("Splitting %d page(s) by ranges %s", page_count, format_ranges(ranges))
            return Explicit(ranges)
        raise ValueError(
            f"Unknown split method '{method}'. Choose from: {', '.join(SPLIT_METHODS)}."
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def info(self, data: bytes, password: Optional[str] = None) -> PDFInfo:
        """Return page count, page sizes and metadata of ``data``."""

        with operation_scope("Reading PDF info"):
            document = self.codec.open(data, password=password)
            sizes = []
            for page in document.iter_pages():
                geometry = self.codec.page_geometry(page)
                sizes.append((geometry.width, geometry.height))
            return PDFInfo(
                num_pages=document.page_count,
                file_size=len(data),
                page_sizes=sizes,
                is_encrypted=document.was_encrypted,
                title=document.metadata_value("Title"),
                author=document.metadata_value("Author"),
                subject=document.metadata_value("Subject"),
                creator=document.metadata_value("Creator"),
                producer=document.metadata_value("Producer"),
            )

    # ------------------------------------------------------------------
    # Split / merge
    # ------------------------------------------------------------------
    def split(
        self,
        data: bytes,
        method: str = "each",
        value: Optional[str] = None,
        *,
        password: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[OutputFile]:
        """Split ``data`` into several PDFs.

        Args:
            data: Source PDF bytes
            method: ``each`` (one file per page), ``pages`` (chunks of
                ``value`` pages) or ``range`` (one file per range in ``value``)
            value: Chunk size or range expression, depending on ``method``
            password: Password for encrypted input

        Returns:
            One :class:`OutputFile` per output document, in plan order
        """
        with operation_scope("Splitting PDF"):
            document = self.codec.open(data, password=password)
            policy = self._policy_for(method, value, document.page_count)
            groups = self.planner.plan(document.page_count, policy)
            results = self.reassembler.reassemble(
                [document],
                groups,
                ReassemblyMode.STRUCTURAL,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )
            return [self._save(result) for result in results]

    def merge(
        self,
        sources: Sequence[bytes],
        *,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OutputFile:
        """Concatenate ``sources`` in the order given."""

        with operation_scope("Merging PDFs"):
            documents = [self.codec.open(data) for data in sources]
            (result,) = self.reassembler.reassemble(
                documents,
                MERGE_ALL,
                ReassemblyMode.STRUCTURAL,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )
            return self._save(result)

    # ------------------------------------------------------------------
    # Page transforms
    # ------------------------------------------------------------------
    def rotate(self, data: bytes, angle: int, **kwargs) -> OutputFile:
        with operation_scope("Rotating PDF"):
            return self._transform_all(data, [Rotate(angle)], "rotated.pdf", **kwargs)

    def crop(
        self,
        data: bytes,
        *,
        top: float = 0,
        right: float = 0,
        bottom: float = 0,
        left: float = 0,
        all_pages: bool = True,
        **kwargs,
    ) -> OutputFile:
        """Crop margins (in millimetres) from every page, or only the first."""

        with operation_scope("Cropping PDF"):
            spec = Crop(top=top, right=right, bottom=bottom, left=left, apply_to_all_pages=all_pages)
            return self._transform_all(data, [spec], "cropped.pdf", **kwargs)

    def watermark(self, data: bytes, text: str, opacity: Optional[float] = None, **kwargs) -> OutputFile:
        with operation_scope("Adding watermark"):
            if not text or not text.strip():
                raise InvalidTransformParameters("Please enter watermark text.")
            spec = Watermark(text, self.config.watermark_opacity if opacity is None else opacity)
            return self._transform_all(data, [spec], "watermarked.pdf", **kwargs)

    def add_page_numbers(
        self,
        data: bytes,
        *,
        position: str = "bottom",
        align: str = "center",
        font_size: Optional[float] = None,
        start_number: int = 1,
        **kwargs,
    ) -> OutputFile:
        with operation_scope("Adding page numbers"):
            spec = PageNumber(
                position=position,
                align=align,
                font_size=self.config.page_number_font_size if font_size is None else font_size,
                start_number=start_number,
            )
            return self._transform_all(data, [spec], "numbered.pdf", **kwargs)

    def redact(
        self,
        data: bytes,
        rectangles: Sequence[RectLike],
        *,
        page: int = 1,
        scale: Optional[float] = None,
        password: Optional[str] = None,
    ) -> OutputFile:
        """Black out ``rectangles`` on one page.

        Rectangles are in pixels of the page rendered at ``scale`` (the
        preview scale by default). The redacted page is flattened to an
        image; every other page is copied unchanged.
        """
        with operation_scope("Redacting PDF"):
            rects = [
                rect if isinstance(rect, RedactionRect) else RedactionRect(*rect)
                for rect in rectangles
            ]
            mask = RedactionMask(rects, scale or self.config.preview_scale)
            validate_transforms([mask])

            document = self.codec.open(data, password=password)
            if page < 1 or page > document.page_count:
                raise OutOfBounds(
                    f"Page {page} is outside the document (pages 1-{document.page_count})."
                )

            (result,) = self.reassembler.reassemble(
                [document],
                MERGE_ALL,
                ReassemblyMode.STRUCTURAL,
                {page - 1: [mask]},
            )
            result.name = "redacted.pdf"
            return self._save(result)

    # ------------------------------------------------------------------
    # Raster conversions
    # ------------------------------------------------------------------
    def compress(
        self,
        data: bytes,
        level: float = 0.7,
        *,
        password: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OutputFile:
        """Re-render every page as JPEG.

        Lower ``level`` means stronger compression: JPEG quality is
        ``level`` clamped to [0.1, 0.9] and the render scale is ``1/level``
        clamped to [0.5, 2].
        """
        with operation_scope("Compressing PDF"):
            if level <= 0:
                raise InvalidTransformParameters("Compression level must be positive.")
            options = RasterOptions(
                scale=_clamp(1 / level, 0.5, 2),
                image_format="jpeg",
                quality=_clamp(level, 0.1, 0.9),
            )
            document = self.codec.open(data, password=password)
            (result,) = self.reassembler.reassemble(
                [document],
                MERGE_ALL,
                ReassemblyMode.RASTERIZE,
                raster_options=options,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )
            result.name = "compressed.pdf"
            return self._save(result)

    def to_images(
        self,
        data: bytes,
        image_format: Optional[str] = None,
        scale: Optional[float] = None,
        quality: Optional[float] = None,
        *,
        password: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[OutputFile]:
        """Render every page to ``page-{n}.png`` (or ``.jpg``)."""

        with operation_scope("Converting PDF to images"):
            config = self.config.with_updates(
                image_format=image_format.lower() if image_format else None,
                render_scale=scale,
                jpeg_quality=quality,
            )
            document = self.codec.open(data, password=password)
            return self.reassembler.export_images(
                document,
                config.raster_options,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )

    def images_to_pdf(
        self,
        images: Sequence[bytes],
        *,
        page_size: str = "a4",
        orientation: str = "portrait",
        margin_mm: float = 10,
    ) -> OutputFile:
        """Place each image, scaled to fit and centered, on its own page."""

        with operation_scope("Converting images to PDF"):
            if not images:
                raise InvalidTransformParameters("Select at least one image.")
            if page_size.lower() not in PAGE_SIZES:
                raise InvalidTransformParameters(
                    f"Unknown page size '{page_size}'. Choose from: {', '.join(PAGE_SIZES)}."
                )
            if orientation not in {"portrait", "landscape"}:
                raise InvalidTransformParameters("Orientation must be 'portrait' or 'landscape'.")

            size = PAGE_SIZES[page_size.lower()]
            page_width, page_height = landscape(size) if orientation == "landscape" else portrait(size)
            margin = mm_to_points(margin_mm)
            max_width = page_width - 2 * margin
            max_height = page_height - 2 * margin
            if max_width <= 0 or max_height <= 0:
                raise InvalidTransformParameters("Margins leave no room for the image.")

            document = self.codec.new_document()
            for image_bytes in images:
                image = self.codec.embed_raster(image_bytes)
                ratio = min(max_width / image.width, max_height / image.height)
                width = image.width * ratio
                height = image.height * ratio
                page = self.codec.add_blank_page(document, page_width, page_height)
                self.codec.draw_image(
                    page,
                    image,
                    (page_width - width) / 2,
                    (page_height - height) / 2,
                    width,
                    height,
                )
            return OutputFile("converted.pdf", self.codec.save(document))

    def to_pptx(
        self,
        data: bytes,
        *,
        password: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OutputFile:
        """Build a 10x7.5 in slide deck with one full-bleed page image per slide."""

        with operation_scope("Converting PDF to PPTX"):
            document = self.codec.open(data, password=password)
            images = self.reassembler.export_images(
                document,
                RasterOptions(scale=SLIDE_RENDER_SCALE, image_format="png"),
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )

            presentation = Presentation()
            presentation.slide_width = SLIDE_WIDTH
            presentation.slide_height = SLIDE_HEIGHT
            layout = presentation.slide_layouts[BLANK_SLIDE_LAYOUT]
            for image in images:
                slide = presentation.slides.add_slide(layout)
                slide.shapes.add_picture(
                    io.BytesIO(image.data), 0, 0, width=SLIDE_WIDTH, height=SLIDE_HEIGHT
                )

            buffer = io.BytesIO()
            presentation.save(buffer)
            return OutputFile("converted.pptx", buffer.getvalue(), PPTX_MEDIA_TYPE)

    # ------------------------------------------------------------------
    # Security
    # ------------------------------------------------------------------
    def protect(self, data: bytes, password: str) -> OutputFile:
        with operation_scope("Protecting PDF"):
            return protect_pdf(self.codec, data, password)

    def unlock(self, data: bytes, password: str) -> OutputFile:
        with operation_scope("Unlocking PDF"):
            return unprotect_pdf(self.codec, data, password)

    # ------------------------------------------------------------------
    # Text and tables
    # ------------------------------------------------------------------
    def extract_text(self, data: bytes, password: Optional[str] = None) -> OutputFile:
        with operation_scope("Extracting text"):
            document = self.codec.open(data, password=password)
            text = "".join(
                f"Page {number}\n{page_text}\n\n"
                for number, page_text in enumerate(self._page_texts(document), start=1)
            )
            return OutputFile("extracted.txt", text.encode("utf-8"), "text/plain")

    def to_html(self, data: bytes, password: Optional[str] = None) -> List[OutputFile]:
        with operation_scope("Converting PDF to HTML"):
            document = self.codec.open(data, password=password)
            pages = []
            for number, page_text in enumerate(self._page_texts(document), start=1):
                markup = (
                    "<!DOCTYPE html><html><head><meta charset='utf-8'>"
                    f"<title>PDF Page {number}</title></head>"
                    f"<body><div>{html.escape(page_text, quote=False)}</div></body></html>"
                )
                pages.append(OutputFile(f"page{number}.html", markup.encode("utf-8"), "text/html"))
            return pages

    def compare(self, first: bytes, second: bytes) -> OutputFile:
        """Report pages whose extracted text differs between two PDFs."""

        with operation_scope("Comparing PDFs"):
            first_texts = self._page_texts(self.codec.open(first))
            second_texts = self._page_texts(self.codec.open(second))

            lines: List[str] = []
            for index in range(max(len(first_texts), len(second_texts))):
                left = first_texts[index] if index < len(first_texts) else ""
                right = second_texts[index] if index < len(second_texts) else ""
                if left != right:
                    lines.extend(
                        [f"Page {index + 1}:", "--- PDF 1 ---", left, "--- PDF 2 ---", right, ""]
                    )

            report = "\n".join(lines) if lines else NO_DIFFERENCES
            return OutputFile("comparison.txt", report.encode("utf-8"), "text/plain")

    def extract_tables(self, data: bytes, password: Optional[str] = None) -> List[List[str]]:
        with operation_scope("Extracting tables"):
            document = self.codec.open(data, password=password)
            return self.table_extractor.extract(
                self.codec.text_runs(page) for page in document.iter_pages()
            )

    def export_tables(self, rows: Sequence[Sequence[str]]) -> List[OutputFile]:
        with operation_scope("Exporting tables"):
            return [
                OutputFile("table.csv", rows_to_csv(rows).encode("utf-8"), "text/csv"),
                OutputFile(
                    "table.xlsx",
                    rows_to_xlsx(rows),
                    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                ),
            ]

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------
    def form_fields(self, data: bytes) -> List[FormField]:
        with operation_scope("Reading form fields"):
            return list_form_fields(self.codec, data)

    def fill_form(self, data: bytes, values: FieldValues) -> OutputFile:
        with operation_scope("Filling form"):
            return fill_form(self.codec, data, values)


def parse_field_values(pairs: Sequence[str]) -> Dict[str, str]:
    """Turn ``name=value`` strings into a field mapping."""

    values: Dict[str, str] = {}
    for pair in pairs:
        name, separator, value = pair.partition("=")
        if not separator or not name.strip():
            raise InvalidTransformParameters(f"Expected 'name=value', got '{pair}'.")
        values[name.strip()] = value
    return values


__all__ = ["PageToolkit", "parse_field_values", "NO_DIFFERENCES", "SPLIT_METHODS"]
