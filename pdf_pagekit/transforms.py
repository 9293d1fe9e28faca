"""Per-page transform specifications.

Every transform is a frozen dataclass carrying only what it needs to apply
itself to one page. :meth:`validate` rejects malformed parameters so a
pipeline can refuse a transform list before touching any page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Optional, Sequence, Tuple, Union

from .exceptions import InvalidAngle, InvalidTransformParameters

POSITIONS = ("top", "bottom")
# Standard Type 1 fonts (Helvetica) are WinAnsi encoded.
STANDARD_FONT_ENCODING = "cp1252"
ALIGNMENTS = ("left", "center", "right")


@dataclass(frozen=True)
class Rotate:
    """Add ``angle`` degrees (clockwise) to the page rotation."""

    kind: ClassVar[str] = "rotate"
    angle: int

    def validate(self) -> None:
        if int(self.angle) != self.angle or int(self.angle) % 90 != 0:
            raise InvalidAngle(f"Rotation angle must be a multiple of 90, got {self.angle}.")


@dataclass(frozen=True)
class Crop:
    """Shrink the visible box by margins given in millimetres."""

    kind: ClassVar[str] = "crop"
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0
    apply_to_all_pages: bool = True

    def validate(self) -> None:
        margins = (self.top, self.right, self.bottom, self.left)
        if any(value < 0 for value in margins):
            raise InvalidTransformParameters("Crop margins must be zero or positive.")

    @property
    def is_noop(self) -> bool:
        return not any((self.top, self.right, self.bottom, self.left))


@dataclass(frozen=True)
class Watermark:
    """Diagonal translucent text centered on the page."""

    kind: ClassVar[str] = "watermark"
    text: str
    opacity: float = 0.3

    def validate(self) -> None:
        if not 0 < self.opacity <= 1:
            raise InvalidTransformParameters(
                f"Watermark opacity must be in (0, 1], got {self.opacity}."
            )
        try:
            self.text.encode(STANDARD_FONT_ENCODING)
        except UnicodeEncodeError as exc:
            raise InvalidTransformParameters(
                "Watermark text contains characters the standard font cannot draw: "
                f"{self.text[exc.start:exc.end]!r}."
            ) from exc


@dataclass(frozen=True)
class PageNumber:
    """Stamp ``start_number + index`` on the page."""

    kind: ClassVar[str] = "page-number"
    position: str = "bottom"
    align: str = "center"
    font_size: float = 14
    start_number: int = 1

    def validate(self) -> None:
        if self.position not in POSITIONS:
            raise InvalidTransformParameters(
                f"Page number position must be one of {', '.join(POSITIONS)}."
            )
        if self.align not in ALIGNMENTS:
            raise InvalidTransformParameters(
                f"Page number alignment must be one of {', '.join(ALIGNMENTS)}."
            )
        if self.font_size <= 0:
            raise InvalidTransformParameters("Page number font size must be positive.")

    def label(self, index: int) -> str:
        return str(self.start_number + index)


@dataclass(frozen=True)
class RedactionRect:
    """Rectangle in preview-surface pixel space."""

    x: float
    y: float
    width: float
    height: float

    def normalized(self) -> Tuple[float, float, float, float]:
        """Return ``(x0, y0, x1, y1)`` with ``x0 <= x1`` and ``y0 <= y1``."""
        x0, x1 = sorted((self.x, self.x + self.width))
        y0, y1 = sorted((self.y, self.y + self.height))
        return x0, y0, x1, y1

    @classmethod
    def parse(cls, value: str) -> "RedactionRect":
        """Build a rectangle from an ``x,y,w,h`` string."""
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 4:
            raise InvalidTransformParameters(
                f"Redaction rectangle must be 'x,y,width,height', got '{value}'."
            )
        try:
            x, y, width, height = (float(part) for part in parts)
        except ValueError as exc:
            raise InvalidTransformParameters(
                f"Redaction rectangle contains a non-numeric value: '{value}'."
            ) from exc
        return cls(x, y, width, height)


@dataclass(frozen=True)
class RedactionMask:
    """Opaque blocks baked into a rasterized copy of the page.

    Applying a mask flattens the page to an image: its text and vector
    content are permanently destroyed.
    """

    kind: ClassVar[str] = "redaction"
    rectangles: Tuple[RedactionRect, ...]
    scale: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rectangles", tuple(self.rectangles))

    def validate(self) -> None:
        if not self.rectangles:
            raise InvalidTransformParameters("Draw at least one rectangle to redact.")
        if self.scale is not None and self.scale <= 0:
            raise InvalidTransformParameters("Redaction scale must be positive.")
        for rect in self.rectangles:
            if rect.width == 0 or rect.height == 0:
                raise InvalidTransformParameters("Redaction rectangles must have an area.")


TransformSpec = Union[Rotate, Crop, Watermark, PageNumber, RedactionMask]
TRANSFORM_TYPES = (Rotate, Crop, Watermark, PageNumber, RedactionMask)


def validate_transforms(transforms: Iterable[TransformSpec]) -> Sequence[TransformSpec]:
    """Validate every transform, returning them as a tuple."""

    checked = tuple(transforms)
    for spec in checked:
        if not isinstance(spec, TRANSFORM_TYPES):
            raise InvalidTransformParameters(f"Unsupported transform: {spec!r}")
        spec.validate()
    return checked


__all__ = [
    "Rotate",
    "Crop",
    "Watermark",
    "PageNumber",
    "RedactionRect",
    "RedactionMask",
    "TransformSpec",
    "validate_transforms",
]
