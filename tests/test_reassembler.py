from __future__ import annotations

import io
import threading
from typing import Callable, List, Tuple

import pytest
from PIL import Image

from pdf_pagekit.backends import PyMuPDFRasterizer, PypdfCodec
from pdf_pagekit.config import EngineConfig
from pdf_pagekit.exceptions import DegenerateCropBox, OperationCancelled, ReassemblyFailed
from pdf_pagekit.pipeline import PageTransformPipeline
from pdf_pagekit.planner import SplitPlanner
from pdf_pagekit.reassembler import MERGE_ALL, DocumentReassembler, ReassemblyMode
from pdf_pagekit.transforms import Crop, Rotate
from pdf_pagekit.types import Each, RasterOptions, SplitGroup


@pytest.fixture()
def codec() -> PypdfCodec:
    return PypdfCodec()


@pytest.fixture()
def reassembler(codec: PypdfCodec) -> DocumentReassembler:
    rasterizer = PyMuPDFRasterizer()
    return DocumentReassembler(codec, rasterizer, PageTransformPipeline(codec, rasterizer, EngineConfig()))


def _sizes(codec: PypdfCodec, document) -> List[Tuple[float, float]]:
    return [
        (codec.page_geometry(page).width, codec.page_geometry(page).height)
        for page in document.iter_pages()
    ]


def test_merge_concatenates_sources_in_order(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    first = codec.open(pdf_factory(pages=2, width=100, height=100))
    second = codec.open(pdf_factory(pages=3, width=200, height=200))

    (merged,) = reassembler.reassemble([first, second], MERGE_ALL)

    assert merged.name == "merged.pdf"
    assert merged.page_count == 5
    assert _sizes(codec, merged.document) == [(100, 100)] * 2 + [(200, 200)] * 3


def test_split_groups_become_documents(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=4))
    groups = [SplitGroup((0, 1), "pages_1-2.pdf"), SplitGroup((1, 2, 3), "pages_2-4.pdf")]

    outputs = reassembler.reassemble([source], groups, ReassemblyMode.STRUCTURAL)

    assert [(output.name, output.page_count) for output in outputs] == [
        ("pages_1-2.pdf", 2),
        ("pages_2-4.pdf", 3),
    ]


def test_structural_copy_keeps_text(
    codec: PypdfCodec, reassembler: DocumentReassembler, text_pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(text_pdf_factory([["alpha"], ["beta"]]))

    outputs = reassembler.reassemble([source], SplitPlanner().plan(2, Each()))

    assert "beta" in outputs[1].document.get_page(0).extract_text()


def test_transform_mapping_targets_output_index(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=3))

    (result,) = reassembler.reassemble([source], MERGE_ALL, transforms={1: [Rotate(90)]})

    rotations = [codec.page_geometry(page).rotation for page in result.document.iter_pages()]
    assert rotations == [0, 90, 0]


def test_transform_callable(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=3))

    (result,) = reassembler.reassemble(
        [source], MERGE_ALL, transforms=lambda index: [Rotate(90 * index)]
    )

    rotations = [codec.page_geometry(page).rotation for page in result.document.iter_pages()]
    assert rotations == [0, 90, 180]


def test_source_document_is_not_modified(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=2))

    reassembler.reassemble([source], MERGE_ALL, transforms=[Rotate(90)])

    assert [codec.page_geometry(page).rotation for page in source.iter_pages()] == [0, 0]


def test_progress_reports_every_page(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=3))
    calls: List[Tuple[int, int]] = []

    reassembler.reassemble(
        [source],
        SplitPlanner().plan(3, Each()),
        progress_callback=lambda done, total: calls.append((done, total)),
    )

    assert calls == [(1, 3), (2, 3), (3, 3)]


def test_cancellation_raises(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=3))
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled):
        reassembler.reassemble([source], MERGE_ALL, cancel_event=cancel)


def test_cancellation_between_pages(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=4))
    cancel = threading.Event()

    def _progress(done: int, total: int) -> None:
        if done == 2:
            cancel.set()

    with pytest.raises(OperationCancelled):
        reassembler.reassemble([source], MERGE_ALL, progress_callback=_progress, cancel_event=cancel)


def test_degenerate_crop_keeps_its_type(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=2, width=72, height=72))

    with pytest.raises(DegenerateCropBox):
        reassembler.reassemble([source], MERGE_ALL, transforms=[Crop(left=30, right=30)])


def test_missing_page_index_fails(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=2))

    with pytest.raises(ReassemblyFailed) as excinfo:
        reassembler.reassemble([source], [SplitGroup((0, 5), "bad.pdf")])

    assert isinstance(excinfo.value.cause, IndexError)


def test_no_sources() -> None:
    codec = PypdfCodec()
    rasterizer = PyMuPDFRasterizer()
    reassembler = DocumentReassembler(codec, rasterizer, PageTransformPipeline(codec, rasterizer))

    with pytest.raises(ReassemblyFailed):
        reassembler.reassemble([], MERGE_ALL)


def test_rasterize_mode_rebuilds_pages_from_images(
    codec: PypdfCodec, reassembler: DocumentReassembler, text_pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(text_pdf_factory([["one"], ["two"]], width=300, height=200))

    (result,) = reassembler.reassemble(
        [source],
        MERGE_ALL,
        ReassemblyMode.RASTERIZE,
        raster_options=RasterOptions(scale=1.5, image_format="jpeg", quality=0.6),
    )

    assert result.page_count == 2
    for page in result.document.iter_pages():
        geometry = codec.page_geometry(page)
        assert geometry.width == pytest.approx(300, abs=1)
        assert geometry.height == pytest.approx(200, abs=1)
        assert "one" not in page.extract_text()
        assert list(page["/Resources"]["/XObject"].keys())


def test_rasterize_mode_applies_rotation_before_rendering(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=1, width=300, height=100))

    (result,) = reassembler.reassemble(
        [source], MERGE_ALL, ReassemblyMode.RASTERIZE, [Rotate(90)], raster_options=RasterOptions(scale=1)
    )

    geometry = codec.page_geometry(result.document.get_page(0))
    assert geometry.rotation == 0
    assert geometry.width == pytest.approx(100, abs=1)
    assert geometry.height == pytest.approx(300, abs=1)


def test_export_images_names_and_sizes(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=2, width=100, height=50))

    images = reassembler.export_images(source, RasterOptions(scale=2.0))

    assert [image.name for image in images] == ["page-1.png", "page-2.png"]
    with Image.open(io.BytesIO(images[0].data)) as rendered:
        assert rendered.size == (200, 100)
        assert rendered.format == "PNG"


def test_export_images_jpeg_subset(
    codec: PypdfCodec, reassembler: DocumentReassembler, pdf_factory: Callable[..., bytes]
) -> None:
    source = codec.open(pdf_factory(pages=3))

    images = reassembler.export_images(source, RasterOptions(image_format="jpeg"), indices=[2])

    assert [image.name for image in images] == ["page-3.jpg"]
    assert images[0].media_type == "image/jpeg"
