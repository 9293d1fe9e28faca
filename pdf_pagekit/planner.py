"""Split planning: turn a page count and a split policy into page groups."""

from __future__ import annotations

from typing import List

from .exceptions import EmptyRangeSet, OutOfBounds
from .types import Each, Explicit, FixedChunk, SplitGroup, SplitPolicy

DEFAULT_CHUNK_SIZE = 5


def page_name(page_number: int, extension: str = "pdf") -> str:
    return f"page_{page_number}.{extension}"


def span_name(start_page: int, end_page: int, extension: str = "pdf") -> str:
    return f"pages_{start_page}-{end_page}.{extension}"


class SplitPlanner:
    """Compute the ordered output groups for a split operation."""

    def __init__(self, *, default_chunk_size: int = DEFAULT_CHUNK_SIZE, extension: str = "pdf") -> None:
        self.default_chunk_size = max(1, default_chunk_size)
        self.extension = extension

    def plan(self, page_count: int, policy: SplitPolicy) -> List[SplitGroup]:
        if page_count < 1:
            raise OutOfBounds(f"Cannot split a document with {page_count} pages.")

        if isinstance(policy, Each):
            return self._plan_each(page_count)
        if isinstance(policy, FixedChunk):
            return self._plan_chunks(page_count, policy.size)
        if isinstance(policy, Explicit):
            return self._plan_explicit(page_count, policy)
        raise TypeError(f"Unknown split policy: {policy!r}")

    def _plan_each(self, page_count: int) -> List[SplitGroup]:
        return [
            SplitGroup((index,), page_name(index + 1, self.extension))
            for index in range(page_count)
        ]

    def _plan_chunks(self, page_count: int, size: int | None) -> List[SplitGroup]:
        chunk_size = size if size is not None and size >= 1 else self.default_chunk_size

        groups: List[SplitGroup] = []
        for start in range(0, page_count, chunk_size):
            end = min(start + chunk_size, page_count)
            groups.append(
                SplitGroup(tuple(range(start, end)), span_name(start + 1, end, self.extension))
            )
        return groups

    def _plan_explicit(self, page_count: int, policy: Explicit) -> List[SplitGroup]:
        if not policy.ranges:
            raise EmptyRangeSet("Explicit split requires at least one page range.")

        groups: List[SplitGroup] = []
        for page_range in policy.ranges:
            if page_range.start < 1 or page_range.end > page_count or page_range.start > page_range.end:
                raise OutOfBounds(
                    f"Range {page_range} exceeds PDF page count ({page_count} pages)."
                )
            groups.append(
                SplitGroup(
                    tuple(page_range.indices()),
                    span_name(page_range.start, page_range.end, self.extension),
                )
            )
        return groups


__all__ = ["SplitPlanner", "DEFAULT_CHUNK_SIZE", "page_name", "span_name"]
