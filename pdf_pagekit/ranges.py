"""Page-range expression parsing.

Expressions are comma-separated tokens, each either ``N`` or ``A-B``
(1-based, inclusive), e.g. ``"1-3,5,7-9"``. The parsed ranges keep the
user's order and duplicates, since output order must follow the input.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .exceptions import EmptyRangeSet, InvalidRangeSyntax, OutOfBounds
from .types import PageRange, RangeSet
from .utils import get_logger

LOGGER = get_logger("pdf_pagekit.ranges")

_TOKEN_RE = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$")


class RangeParser:
    """Parse range expressions against a document's page count.

    In the default permissive mode malformed tokens are dropped with a
    warning. ``strict=True`` raises :class:`InvalidRangeSyntax` on the first
    malformed token instead. Out-of-bounds endpoints always raise.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def parse(self, expression: Optional[str], max_page: int) -> RangeSet:
        if max_page < 1:
            raise OutOfBounds(f"Document has no pages to select from (max page {max_page}).")
        if expression is None or not expression.strip():
            raise EmptyRangeSet("Page range expression cannot be empty.")

        ranges: List[PageRange] = []
        for raw_token in expression.split(","):
            token = raw_token.strip()
            if not token:
                continue

            parsed = self._parse_token(token)
            if parsed is None:
                continue

            start, end = parsed
            if start < 1 or end > max_page:
                raise OutOfBounds(
                    f"Range '{token}' is outside the document (pages 1-{max_page})."
                )
            ranges.append(PageRange(start, end))

        if not ranges:
            raise EmptyRangeSet(
                f"No valid page range in '{expression}'. Use e.g. '1-3,5,7-9'."
            )
        return ranges

    def _parse_token(self, token: str) -> Optional[tuple[int, int]]:
        match = _TOKEN_RE.match(token)
        if not match:
            return self._reject(
                token, f"Invalid range format: '{token}'. Expected 'N' or 'start-end'."
            )

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if start > end:
            return self._reject(
                token,
                f"Invalid range '{token}': start page ({start}) must be <= end page ({end}).",
            )
        return start, end

    def _reject(self, token: str, message: str) -> None:
        if self.strict:
            raise InvalidRangeSyntax(message)
        LOGGER.warning("Dropping malformed range token %r", token)
        return None


def parse_ranges(expression: Optional[str], max_page: int, *, strict: bool = False) -> RangeSet:
    """Parse ``expression`` into an ordered list of :class:`PageRange`."""

    return RangeParser(strict=strict).parse(expression, max_page)


def format_ranges(ranges: RangeSet) -> str:
    return ",".join(str(item) for item in ranges)


__all__ = ["RangeParser", "parse_ranges", "format_ranges"]
