"""Backend abstractions for PDF PageKit."""

from .base import DocumentCodec, RasterImage, Rasterizer
from .pymupdf_rasterizer import PyMuPDFRasterizer
from .pypdf_backend import PypdfCodec

__all__ = [
    "DocumentCodec",
    "Rasterizer",
    "RasterImage",
    "PypdfCodec",
    "PyMuPDFRasterizer",
]
