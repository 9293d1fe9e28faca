from __future__ import annotations

import logging

import pytest

from pdf_pagekit.exceptions import EmptyRangeSet, InvalidRangeSyntax, OutOfBounds
from pdf_pagekit.ranges import RangeParser, format_ranges, parse_ranges
from pdf_pagekit.types import PageRange


def test_parse_ranges_keeps_user_order() -> None:
    ranges = parse_ranges("1-3,5,7-9", 10)

    assert [tuple(item) for item in ranges] == [(1, 3), (5, 5), (7, 9)]


def test_parse_ranges_keeps_duplicates_and_overlaps() -> None:
    ranges = parse_ranges("5-6,1-2,5-6,2-3", 6)

    assert ranges == [PageRange(5, 6), PageRange(1, 2), PageRange(5, 6), PageRange(2, 3)]


def test_parse_ranges_ignores_whitespace_and_empty_tokens() -> None:
    ranges = parse_ranges(" 2 - 4 , ,6,", 6)

    assert ranges == [PageRange(2, 4), PageRange(6, 6)]


@pytest.mark.parametrize("expression", ["0-2", "0", "4-11", "11"])
def test_parse_ranges_out_of_bounds(expression: str) -> None:
    with pytest.raises(OutOfBounds):
        parse_ranges(expression, 10)


def test_reversed_range_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("pdf_pagekit.ranges")
    logger.propagate = True
    try:
        with caplog.at_level(logging.WARNING, logger="pdf_pagekit.ranges"):
            ranges = parse_ranges("3-1,4", 10)
    finally:
        logger.propagate = False

    assert ranges == [PageRange(4, 4)]
    assert "3-1" in caplog.text


def test_reversed_range_alone_is_empty() -> None:
    with pytest.raises(EmptyRangeSet):
        parse_ranges("3-1", 10)


@pytest.mark.parametrize("expression", ["", "   ", None, ",,"])
def test_empty_expression(expression: str | None) -> None:
    with pytest.raises(EmptyRangeSet):
        parse_ranges(expression, 10)


def test_malformed_tokens_dropped_in_permissive_mode() -> None:
    assert parse_ranges("abc,2,1-x,3-", 5) == [PageRange(2, 2)]


@pytest.mark.parametrize("expression", ["abc", "1-x", "3-1", "1--2"])
def test_strict_mode_raises_on_malformed_token(expression: str) -> None:
    with pytest.raises(InvalidRangeSyntax):
        RangeParser(strict=True).parse(f"1,{expression}", 5)


def test_out_of_bounds_wins_over_permissive_mode() -> None:
    with pytest.raises(OutOfBounds):
        RangeParser(strict=False).parse("1,2-20", 5)


def test_zero_page_document_is_out_of_bounds() -> None:
    with pytest.raises(OutOfBounds):
        parse_ranges("1", 0)


def test_format_ranges_writes_explicit_spans() -> None:
    assert format_ranges(parse_ranges("1-3,5,7-9", 9)) == "1-3,5-5,7-9"


def test_page_range_indices_are_zero_based() -> None:
    assert list(PageRange(2, 4).indices()) == [1, 2, 3]
