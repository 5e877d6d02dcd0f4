"""Unit tests for page numbers and the page locator."""

import pytest

from score_archive_api.app.core.db import get_cursor
from score_archive_api.app.core.errors import InvalidLocation, InvalidRange
from score_archive_api.app.repositories.book_repository import BookRepository
from score_archive_api.app.schemas.book import BookCreate
from score_archive_api.app.schemas.page import Page, PageNumber
from score_archive_api.app.services.page_locator import PageLocator


def pn(number, prefix=None, suffix=None):
    return PageNumber(prefix=prefix, number=number, suffix=suffix)


def test_page_number_ordering_prefix_then_number_then_suffix():
    ordered = [
        pn(3),
        pn(10),
        pn(1, prefix="A"),
        pn(2, prefix="A"),
        pn(2, prefix="A", suffix="a"),
        pn(2, prefix="A", suffix="b"),
        pn(1, prefix="B"),
    ]
    shuffled = [ordered[i] for i in (4, 0, 6, 2, 5, 1, 3)]
    assert sorted(shuffled) == ordered


def test_blank_prefix_and_suffix_are_absent():
    number = pn(4, prefix="  ", suffix="")
    assert number.prefix is None
    assert number.suffix is None
    assert number == pn(4)


def test_page_number_str():
    assert str(pn(6, prefix="A")) == "A6"
    assert str(pn(12, suffix="b")) == "12b"


@pytest.mark.parametrize(
    "a, b",
    [
        (pn(1), pn(1)),
        (pn(1), pn(2)),
        (pn(9), pn(1, prefix="A")),
        (pn(1, prefix="A"), pn(1, prefix="A", suffix="a")),
        (pn(5, prefix="A", suffix="a"), pn(5, prefix="A", suffix="b")),
    ],
)
def test_range_accepted_and_reversed_range_rejected(a, b):
    PageLocator.check_range(Page(book=1, begin=a, end=b))
    if a != b:
        with pytest.raises(InvalidRange) as exc_info:
            PageLocator.check_range(Page(book=1, begin=b, end=a))
        assert exc_info.value.field == "location.end"


def test_single_page_location_is_valid():
    PageLocator.check_range(Page(book=1, begin=pn(7)))


def test_contains():
    page = Page(book=1, begin=pn(2, prefix="A"), end=pn(4, prefix="A"))
    assert PageLocator.contains(page, pn(2, prefix="A"))
    assert PageLocator.contains(page, pn(3, prefix="A", suffix="b"))
    assert PageLocator.contains(page, pn(4, prefix="A"))
    assert not PageLocator.contains(page, pn(4, prefix="A", suffix="a"))
    assert not PageLocator.contains(page, pn(3))

    single = Page(book=1, begin=pn(5))
    assert PageLocator.contains(single, pn(5))
    assert not PageLocator.contains(single, pn(6))


def test_overlaps_requires_same_book():
    a = Page(book=1, begin=pn(1), end=pn(3))
    b = Page(book=1, begin=pn(3), end=pn(5))
    c = Page(book=2, begin=pn(1), end=pn(3))
    d = Page(book=1, begin=pn(4))
    assert PageLocator.overlaps(a, b)
    assert PageLocator.overlaps(b, a)
    assert not PageLocator.overlaps(a, c)
    assert not PageLocator.overlaps(a, d)
    assert PageLocator.overlaps(b, d)


def test_validate_rejects_unknown_book():
    with get_cursor() as cursor:
        books = BookRepository(cursor)
        book_id = books.insert(BookCreate(name="Rot"))
        PageLocator.validate(books, Page(book=book_id, begin=pn(1), end=pn(2)))
        with pytest.raises(InvalidLocation) as exc_info:
            PageLocator.validate(books, Page(book=book_id + 1, begin=pn(1)))
        assert exc_info.value.field == "location.book"
        with pytest.raises(InvalidRange):
            PageLocator.validate(books, Page(book=book_id, begin=pn(2), end=pn(1)))
