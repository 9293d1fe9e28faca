"""
Type definitions and dataclasses for PDF PageKit.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class PageRange:
    """
    Closed, 1-based page interval selected by the user.

    Attributes:
        start: First page number (inclusive)
        end: Last page number (inclusive)
    """
    start: int
    end: int

    def indices(self) -> range:
        """Return the 0-based page indices covered by the range."""
        return range(self.start - 1, self.end)

    def __iter__(self):
        return iter((self.start, self.end))

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


RangeSet = List[PageRange]


@dataclass(frozen=True)
class PageGeometry:
    """
    Visible geometry of a page in PDF points.

    Attributes:
        width: Width of the visible box
        height: Height of the visible box
        left: X origin of the visible box
        bottom: Y origin of the visible box
        rotation: Display rotation, one of 0, 90, 180, 270
    """
    width: float
    height: float
    left: float = 0.0
    bottom: float = 0.0
    rotation: int = 0


@dataclass(frozen=True)
class SplitGroup:
    """
    Pages destined for one output document.

    Attributes:
        indices: 0-based page indices, strictly increasing
        name: Output file name
        source: Index of the source document the pages are taken from
    """
    indices: Tuple[int, ...]
    name: str
    source: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", tuple(self.indices))
        for current, nxt in zip(self.indices, self.indices[1:]):
            if nxt <= current:
                raise ValueError(
                    f"Split group '{self.name}' indices must be strictly increasing"
                )
        if any(index < 0 for index in self.indices):
            raise ValueError(f"Split group '{self.name}' contains a negative index")

    def __len__(self) -> int:
        return len(self.indices)


@dataclass(frozen=True)
class Each:
    """Split policy producing one output per page."""


@dataclass(frozen=True)
class FixedChunk:
    """Split policy producing contiguous windows of ``size`` pages."""
    size: Optional[int] = None


@dataclass(frozen=True)
class Explicit:
    """Split policy producing one output per user supplied range."""
    ranges: Sequence[PageRange] = ()


SplitPolicy = Union[Each, FixedChunk, Explicit]


@dataclass(frozen=True)
class RasterOptions:
    """
    Rendering options for rasterize-and-reimport and image export.

    Attributes:
        scale: Render scale relative to 72 dpi
        image_format: ``png`` (lossless) or ``jpeg`` (lossy)
        quality: JPEG quality in (0, 1]; ignored for PNG
    """
    scale: float = 2.0
    image_format: str = "png"
    quality: float = 0.9

    @property
    def extension(self) -> str:
        return "jpg" if self.image_format in {"jpeg", "jpg"} else self.image_format


@dataclass
class OutputFile:
    """
    Serialized artifact produced by an operation.

    Attributes:
        name: File name following the output naming convention
        data: Raw bytes
        media_type: MIME type of ``data``
    """
    name: str
    data: bytes
    media_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return f"OutputFile(name='{self.name}', size={self.size})"


@dataclass
class PDFInfo:
    """
    PDF document information and metadata.

    Attributes:
        num_pages: Number of pages in the PDF
        file_size: File size in bytes
        page_sizes: (width, height) of every page in points
        is_encrypted: Whether the PDF is encrypted
        title: PDF title metadata
        author: PDF author metadata
        subject: PDF subject metadata
        creator: PDF creator application
        producer: PDF producer application
    """
    num_pages: int
    file_size: int
    page_sizes: List[Tuple[float, float]] = field(default_factory=list)
    is_encrypted: bool = False
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None


@dataclass
class FormField:
    """A fillable AcroForm field."""
    name: str
    value: str = ""
    field_type: Optional[str] = None


FieldValues = Dict[str, str]
