"""Document reassembly: copy or re-render pages into output documents.

Two strategies are supported:

* ``STRUCTURAL`` copies page objects, keeping text and vector content.
* ``RASTERIZE`` renders every page to an image and rebuilds the document
  from those images (used for compression).

A failure on any page aborts the whole call; partial outputs are never
returned. Transform errors keep their type; other page failures are wrapped
in ReassemblyFailed.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .backends.base import DocumentCodec, Rasterizer
from .document import Document
from .exceptions import OperationCancelled, ReassemblyFailed, TransformError
from .pipeline import PageTransformPipeline
from .transforms import TransformSpec
from .types import OutputFile, RasterOptions, SplitGroup
from .utils import get_logger

LOGGER = get_logger("pdf_pagekit.reassembler")

MERGE_ALL = "merge-all"
MERGED_NAME = "merged.pdf"

TransformSource = Union[
    Sequence[TransformSpec],
    Mapping[int, Sequence[TransformSpec]],
    Callable[[int], Sequence[TransformSpec]],
    None,
]
ProgressCallback = Callable[[int, int], None]

# (output name, [(source position, page indices), ...])
_OutputPlan = Tuple[str, List[Tuple[int, Tuple[int, ...]]]]

_MEDIA_TYPES = {"png": "image/png", "jpg": "image/jpeg"}


class ReassemblyMode(Enum):
    STRUCTURAL = "structural"
    RASTERIZE = "rasterize"


@dataclass
class ReassembledDocument:
    """Output document produced for one split group."""

    name: str
    document: Document

    @property
    def page_count(self) -> int:
        return self.document.page_count


def _resolve_transforms(transforms: TransformSource, output_index: int) -> Sequence[TransformSpec]:
    if transforms is None:
        return ()
    if callable(transforms):
        return transforms(output_index) or ()
    if isinstance(transforms, Mapping):
        return transforms.get(output_index, ())
    return transforms


class DocumentReassembler:
    """Drive page copy from source documents into output documents."""

    def __init__(
        self,
        codec: DocumentCodec,
        rasterizer: Rasterizer,
        pipeline: PageTransformPipeline,
    ) -> None:
        self.codec = codec
        self.rasterizer = rasterizer
        self.pipeline = pipeline

    def reassemble(
        self,
        sources: Sequence[Document],
        groups: Union[Sequence[SplitGroup], str],
        mode: ReassemblyMode = ReassemblyMode.STRUCTURAL,
        transforms: TransformSource = None,
        *,
        raster_options: Optional[RasterOptions] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ReassembledDocument]:
        """Build one output document per group.

        Args:
            sources: Decoded source documents
            groups: Split groups, or ``MERGE_ALL`` to concatenate every source
            mode: Structural copy or rasterize-and-reimport
            transforms: Transforms applied per output page, as one shared
                sequence, a mapping keyed by output-page index, or a callable
            raster_options: Render settings for ``RASTERIZE`` mode
            progress_callback: Called with ``(done_pages, total_pages)``
            cancel_event: Checked before every page

        Returns:
            The output documents in group order

        Raises:
            ReassemblyFailed: If any page cannot be copied or rendered
            TransformError: If a transform rejects a page, e.g. ``DegenerateCropBox``
            OperationCancelled: If ``cancel_event`` is set
        """
        if not sources:
            raise ReassemblyFailed("At least one source document is required.")

        plan = self._plan_outputs(sources, groups)
        total_pages = sum(len(indices) for _, segments in plan for _, indices in segments)
        options = raster_options or RasterOptions()

        outputs: List[ReassembledDocument] = []
        done = 0
        try:
            for name, segments in plan:
                output = self.codec.new_document()
                output_index = 0
                for source_position, indices in segments:
                    source = sources[source_position]
                    for page_index in indices:
                        if cancel_event is not None and cancel_event.is_set():
                            raise OperationCancelled(
                                f"Cancelled after {done} of {total_pages} pages."
                            )

                        specs = _resolve_transforms(transforms, output_index)
                        if mode is ReassemblyMode.RASTERIZE:
                            self._rasterize_page(output, source, page_index, specs, output_index, options)
                        else:
                            self._copy_page(output, source, page_index, specs, output_index)

                        output_index += 1
                        done += 1
                        LOGGER.debug(
                            "%s: page %d -> %s (%d/%d)",
                            mode.value,
                            page_index + 1,
                            name,
                            done,
                            total_pages,
                        )
                        if progress_callback:
                            progress_callback(done, total_pages)

                outputs.append(ReassembledDocument(name, output))
        except (OperationCancelled, ReassemblyFailed, TransformError):
            raise
        except Exception as exc:
            raise ReassemblyFailed(
                f"Page {done + 1} of {total_pages} could not be processed: {exc}",
                cause=exc,
            ) from exc

        return outputs

    @staticmethod
    def _plan_outputs(
        sources: Sequence[Document],
        groups: Union[Sequence[SplitGroup], str],
    ) -> List[_OutputPlan]:
        if isinstance(groups, str):
            if groups != MERGE_ALL:
                raise ReassemblyFailed(f"Unknown group sentinel: {groups!r}")
            segments = [
                (position, tuple(range(source.page_count)))
                for position, source in enumerate(sources)
            ]
            return [(MERGED_NAME, segments)]

        plan: List[_OutputPlan] = []
        for group in groups:
            if group.source >= len(sources):
                raise ReassemblyFailed(
                    f"Group '{group.name}' refers to missing source {group.source}."
                )
            plan.append((group.name, [(group.source, group.indices)]))
        return plan

    def _copy_page(
        self,
        output: Document,
        source: Document,
        page_index: int,
        specs: Sequence[TransformSpec],
        output_index: int,
    ) -> None:
        (page,) = self.codec.copy_pages(output, source, [page_index])
        if specs:
            self.pipeline.apply(page, specs, index=output_index)

    def _rasterize_page(
        self,
        output: Document,
        source: Document,
        page_index: int,
        specs: Sequence[TransformSpec],
        output_index: int,
        options: RasterOptions,
    ) -> None:
        scratch = self.codec.new_document()
        (page,) = self.codec.copy_pages(scratch, source, [page_index])
        if specs:
            self.pipeline.apply(page, specs, index=output_index)

        with self.rasterizer.rendered_page(page, options.scale) as surface:
            pixel_width, pixel_height = surface.size
            image_bytes = self.rasterizer.encode_surface(
                surface, options.image_format, options.quality
            )

        width = pixel_width / options.scale
        height = pixel_height / options.scale
        image = self.codec.embed_raster(image_bytes)
        new_page = self.codec.add_blank_page(output, width, height)
        self.codec.draw_image(new_page, image, 0, 0, width, height)

    def export_images(
        self,
        source: Document,
        options: RasterOptions,
        indices: Optional[Sequence[int]] = None,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[OutputFile]:
        """Render pages to encoded images named ``page-{n}.{ext}``."""

        selected = list(indices) if indices is not None else list(range(source.page_count))
        media_type = _MEDIA_TYPES.get(options.extension, "application/octet-stream")

        images: List[OutputFile] = []
        try:
            for done, page_index in enumerate(selected, start=1):
                if cancel_event is not None and cancel_event.is_set():
                    raise OperationCancelled(
                        f"Cancelled after {done - 1} of {len(selected)} pages."
                    )
                page = source.get_page(page_index)
                with self.rasterizer.rendered_page(page, options.scale) as surface:
                    data = self.rasterizer.encode_surface(
                        surface, options.image_format, options.quality
                    )
                images.append(
                    OutputFile(f"page-{page_index + 1}.{options.extension}", data, media_type)
                )
                LOGGER.debug("Rendered page %d (%d/%d)", page_index + 1, done, len(selected))
                if progress_callback:
                    progress_callback(done, len(selected))
        except (OperationCancelled, ReassemblyFailed):
            raise
        except Exception as exc:
            raise ReassemblyFailed(f"Image export failed: {exc}", cause=exc) from exc

        return images


__all__ = [
    "DocumentReassembler",
    "ReassembledDocument",
    "ReassemblyMode",
    "MERGE_ALL",
    "MERGED_NAME",
]
