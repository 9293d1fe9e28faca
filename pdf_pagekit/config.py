"""Engine configuration for PDF PageKit.

The rasterizer and codec settings are explicit values handed to
:class:`~pdf_pagekit.toolkit.PageToolkit` at construction time instead of
process-wide globals.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any

from .types import RasterOptions

ENV_PREFIX = "PDF_PAGEKIT_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else default


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by the codec, rasterizer and pipeline."""

    render_scale: float = 2.0
    preview_scale: float = 1.2
    image_format: str = "png"
    jpeg_quality: float = 0.9
    default_chunk_size: int = 5
    watermark_opacity: float = 0.3
    page_number_font_size: float = 14
    strict_ranges: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.render_scale <= 0 or self.preview_scale <= 0:
            raise ValueError("Render scales must be positive")
        if self.image_format not in {"png", "jpeg", "jpg"}:
            raise ValueError(f"Unsupported image format: {self.image_format}")
        if not 0 < self.jpeg_quality <= 1:
            raise ValueError("JPEG quality must be in (0, 1]")
        if self.default_chunk_size < 1:
            raise ValueError("Default chunk size must be >= 1")

    @property
    def raster_options(self) -> RasterOptions:
        return RasterOptions(
            scale=self.render_scale,
            image_format=self.image_format,
            quality=self.jpeg_quality,
        )

    def with_updates(self, **updates: Any) -> "EngineConfig":
        return replace(self, **{k: v for k, v in updates.items() if v is not None})

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "EngineConfig":
        defaults = cls()
        return cls(
            render_scale=_env_float(f"{prefix}RENDER_SCALE", defaults.render_scale),
            preview_scale=_env_float(f"{prefix}PREVIEW_SCALE", defaults.preview_scale),
            image_format=_env_str(f"{prefix}IMAGE_FORMAT", defaults.image_format).lower(),
            jpeg_quality=_env_float(f"{prefix}JPEG_QUALITY", defaults.jpeg_quality),
            default_chunk_size=_env_int(f"{prefix}CHUNK_SIZE", defaults.default_chunk_size),
            watermark_opacity=_env_float(f"{prefix}WATERMARK_OPACITY", defaults.watermark_opacity),
            page_number_font_size=_env_float(
                f"{prefix}PAGE_NUMBER_FONT_SIZE", defaults.page_number_font_size
            ),
            strict_ranges=_env_bool(f"{prefix}STRICT_RANGES", defaults.strict_ranges),
            log_level=_env_str(f"{prefix}LOG_LEVEL", defaults.log_level),
        )
