"""Working-copy document handle used by the codec and reassembler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from pypdf import PageObject, PdfWriter


@dataclass
class Document:
    """A decoded PDF owned by exactly one operation.

    Attributes:
        writer: Mutable ``pypdf`` writer holding the pages
        file_size: Size of the bytes the document was decoded from
        was_encrypted: Whether the source needed a password
        metadata: Document information dictionary copied from the source
    """

    writer: PdfWriter
    file_size: int = 0
    was_encrypted: bool = False
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.writer.pages)

    def get_page(self, index: int) -> PageObject:
        if index < 0 or index >= self.page_count:
            raise IndexError(f"Page index {index} out of range for {self.page_count} pages")
        return self.writer.pages[index]

    def iter_pages(self) -> Iterator[PageObject]:
        return iter(self.writer.pages)

    def metadata_value(self, key: str) -> Optional[Any]:
        return self.metadata.get(key if key.startswith("/") else f"/{key}")


__all__ = ["Document"]
