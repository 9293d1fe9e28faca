"""
PDF PageKit - page-level PDF transformation and reassembly.

This library splits, merges and transforms PDF pages (rotate, crop,
watermark, page numbers, redaction) and rebuilds valid output documents,
either by copying page objects or by re-rendering pages as images.

Quick Start:
    >>> from pdf_pagekit import PageToolkit
    >>> toolkit = PageToolkit()
    >>> files = toolkit.split(data, method="range", value="1-3,5,7-9")
    >>> merged = toolkit.merge([first, second])

Main Classes:
    - PageToolkit: High-level operations on PDF bytes
    - RangeParser: Page-range expression parsing
    - SplitPlanner: Split policy to page groups
    - PageTransformPipeline: Per-page transforms
    - DocumentReassembler: Structural or raster reassembly
    - TableExtractor: Heuristic table rows from page text

Exceptions:
    - PageKitError: Base exception
    - InvalidRangeSyntax, OutOfBounds, EmptyRangeSet: Page selection errors
    - InvalidAngle, DegenerateCropBox, InvalidTransformParameters: Transform errors
    - DecodeError, WrongPassword: Input errors
    - ReassemblyFailed, OperationCancelled, OperationFailed: Operation errors

For CLI usage, use the 'pdf-pagekit' command after installation.
"""

__version__ = "1.0.0"

# Core classes
from pdf_pagekit.toolkit import PageToolkit
from pdf_pagekit.config import EngineConfig
from pdf_pagekit.ranges import RangeParser, parse_ranges
from pdf_pagekit.planner import SplitPlanner
from pdf_pagekit.pipeline import PageTransformPipeline
from pdf_pagekit.reassembler import MERGE_ALL, DocumentReassembler, ReassemblyMode
from pdf_pagekit.tables import TableExtractor

# Data types
from pdf_pagekit.types import (
    Each,
    Explicit,
    FixedChunk,
    FormField,
    OutputFile,
    PageGeometry,
    PageRange,
    PDFInfo,
    RasterOptions,
    SplitGroup,
)
from pdf_pagekit.transforms import (
    Crop,
    PageNumber,
    RedactionMask,
    RedactionRect,
    Rotate,
    Watermark,
)

# Exceptions
from pdf_pagekit.exceptions import (
    PageKitError,
    PageRangeError,
    InvalidRangeSyntax,
    OutOfBounds,
    EmptyRangeSet,
    TransformError,
    InvalidAngle,
    DegenerateCropBox,
    InvalidTransformParameters,
    DecodeError,
    WrongPassword,
    PasswordRequired,
    EncryptionStateError,
    NoFillableFields,
    NoTableDetected,
    ReassemblyFailed,
    OperationCancelled,
    OperationFailed,
)

# Utility functions
from pdf_pagekit.utils import format_file_size

__author__ = "PDF PageKit Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "PageToolkit",
    "EngineConfig",
    "RangeParser",
    "parse_ranges",
    "SplitPlanner",
    "PageTransformPipeline",
    "DocumentReassembler",
    "ReassemblyMode",
    "MERGE_ALL",
    "TableExtractor",
    # Data types
    "Each",
    "Explicit",
    "FixedChunk",
    "FormField",
    "OutputFile",
    "PageGeometry",
    "PageRange",
    "PDFInfo",
    "RasterOptions",
    "SplitGroup",
    "Rotate",
    "Crop",
    "Watermark",
    "PageNumber",
    "RedactionRect",
    "RedactionMask",
    # Exceptions
    "PageKitError",
    "PageRangeError",
    "InvalidRangeSyntax",
    "OutOfBounds",
    "EmptyRangeSet",
    "TransformError",
    "InvalidAngle",
    "DegenerateCropBox",
    "InvalidTransformParameters",
    "DecodeError",
    "WrongPassword",
    "PasswordRequired",
    "EncryptionStateError",
    "NoFillableFields",
    "NoTableDetected",
    "ReassemblyFailed",
    "OperationCancelled",
    "OperationFailed",
    # Utility functions
    "format_file_size",
    # Version info
    "__version__",
]
