from __future__ import annotations

import pytest

from pdf_pagekit.exceptions import EmptyRangeSet, OutOfBounds
from pdf_pagekit.planner import SplitPlanner
from pdf_pagekit.types import Each, Explicit, FixedChunk, PageRange, SplitGroup


@pytest.mark.parametrize("page_count", [1, 2, 7])
def test_each_partitions_every_page(page_count: int) -> None:
    groups = SplitPlanner().plan(page_count, Each())

    assert len(groups) == page_count
    assert [group.indices for group in groups] == [(index,) for index in range(page_count)]
    assert [group.name for group in groups] == [f"page_{n}.pdf" for n in range(1, page_count + 1)]


@pytest.mark.parametrize(
    ("page_count", "size"),
    [(12, 5), (10, 5), (3, 5), (7, 1), (7, 3)],
)
def test_fixed_chunk_partitions_in_order(page_count: int, size: int) -> None:
    groups = SplitPlanner().plan(page_count, FixedChunk(size))

    flattened = [index for group in groups for index in group.indices]
    assert flattened == list(range(page_count))
    assert all(len(group) == size for group in groups[:-1])
    assert 1 <= len(groups[-1]) <= size


def test_fixed_chunk_names() -> None:
    groups = SplitPlanner().plan(12, FixedChunk(5))

    assert [group.name for group in groups] == ["pages_1-5.pdf", "pages_6-10.pdf", "pages_11-12.pdf"]


@pytest.mark.parametrize("size", [None, 0, -3])
def test_fixed_chunk_falls_back_to_default_size(size: int | None) -> None:
    groups = SplitPlanner().plan(11, FixedChunk(size))

    assert [len(group) for group in groups] == [5, 5, 1]


def test_configured_default_chunk_size() -> None:
    groups = SplitPlanner(default_chunk_size=4).plan(9, FixedChunk())

    assert [len(group) for group in groups] == [4, 4, 1]


def test_explicit_ranges_allow_overlap_and_gaps() -> None:
    policy = Explicit([PageRange(4, 5), PageRange(1, 2), PageRange(2, 3)])

    groups = SplitPlanner().plan(6, policy)

    assert [group.indices for group in groups] == [(3, 4), (0, 1), (1, 2)]
    assert [group.name for group in groups] == ["pages_4-5.pdf", "pages_1-2.pdf", "pages_2-3.pdf"]


def test_explicit_requires_ranges() -> None:
    with pytest.raises(EmptyRangeSet):
        SplitPlanner().plan(3, Explicit([]))


def test_explicit_range_beyond_document() -> None:
    with pytest.raises(OutOfBounds):
        SplitPlanner().plan(3, Explicit([PageRange(2, 4)]))


def test_empty_document_cannot_be_planned() -> None:
    with pytest.raises(OutOfBounds):
        SplitPlanner().plan(0, Each())


def test_unknown_policy() -> None:
    with pytest.raises(TypeError):
        SplitPlanner().plan(3, "each")  # type: ignore[arg-type]


def test_split_group_requires_increasing_indices() -> None:
    with pytest.raises(ValueError):
        SplitGroup((2, 1), "bad.pdf")
