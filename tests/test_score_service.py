"""Tests for score creation, replacement and deletion."""

import logging

import pytest

from score_archive_api.app.core.db import get_cursor
from score_archive_api.app.core.errors import (
    IdNotAllowed,
    InvalidLocation,
    InvalidRange,
    NotFound,
    SelfReference,
)
from score_archive_api.app.schemas.book import BookCreate
from score_archive_api.app.schemas.page import Page, PageNumber
from score_archive_api.app.schemas.score import ScoreCreate, ScoreUpdate
from score_archive_api.app.services.book_service import BookService
from score_archive_api.app.services.score_service import ScoreService


@pytest.fixture
def book(run):
    return run(BookService.create_book(BookCreate(name="Rot", annotation="New covers")))


def test_create_then_get_round_trip(run, book):
    payload = ScoreCreate(
        title="Böhmischer Traum",
        genres=["Polka", "Blasmusik"],
        composers=["Norbert Gälle"],
        arrangers=["Franz Watz"],
        publishers=["Rundel"],
        grade="C",
        alias=["Bohemian Dream"],
        sub_titles=["Teil 1", "Trio", "Teil 1"],
        annotation="Klassiker",
        location=Page(book=book.id, begin=PageNumber(prefix="A", number=6), end=PageNumber(prefix="A", number=7)),
    )
    created = run(ScoreService.create_score(payload))
    assert created.id is not None

    fetched = run(ScoreService.get_score(created.id))
    assert fetched == created
    assert fetched.title == payload.title
    assert set(fetched.genres) == set(payload.genres)
    assert fetched.composers == ["Norbert Gälle"]
    assert fetched.arrangers == ["Franz Watz"]
    assert fetched.publishers == ["Rundel"]
    assert fetched.alias == ["Bohemian Dream"]
    assert fetched.sub_titles == ["Teil 1", "Trio", "Teil 1"]
    assert fetched.grade == "C"
    assert fetched.annotation == "Klassiker"
    assert fetched.back_of is None
    assert fetched.location == payload.location


def test_sets_are_deduplicated_per_score(run):
    created = run(
        ScoreService.create_score(
            ScoreCreate(title="baum", alias=["strauch", " strauch", "teller"], genres=["Marsch", "Marsch"])
        )
    )
    assert sorted(created.alias) == ["strauch", "teller"]
    assert created.genres == ["Marsch"]


def test_contributors_are_registered_once_across_scores(run):
    first = run(ScoreService.create_score(ScoreCreate(title="A", composers=["Julius Fučík"])))
    second = run(ScoreService.create_score(ScoreCreate(title="B", composers=["Julius Fučík", "Ernst Mosch"])))
    assert first.composers == ["Julius Fučík"]
    assert second.composers == ["Ernst Mosch", "Julius Fučík"]
    with get_cursor() as cursor:
        count = "SELECT COUNT(*) AS n FROM {} WHERE name = ?"
        assert cursor.execute(count.format("composers"), ("Julius Fučík",)).fetchone()["n"] == 1
        assert cursor.execute(count.format("composers"), ("Ernst Mosch",)).fetchone()["n"] == 1
        assert cursor.execute(count.format("arrangers"), ("Julius Fučík",)).fetchone()["n"] == 0


def test_create_rejects_client_id(run):
    with pytest.raises(IdNotAllowed) as exc_info:
        run(ScoreService.create_score(ScoreCreate(id=3, title="baum")))
    assert exc_info.value.field == "id"


def test_create_rejects_unknown_book(run):
    with pytest.raises(InvalidLocation):
        run(ScoreService.create_score(ScoreCreate(title="baum", location=Page(book=99, begin=PageNumber(number=1)))))


def test_create_rejects_reversed_range_without_writing(run, book):
    location = Page(book=book.id, begin=PageNumber(number=5), end=PageNumber(number=2))
    with pytest.raises(InvalidRange):
        run(ScoreService.create_score(ScoreCreate(title="baum", location=location)))
    assert run(BookService.get_book_pages(book.id)) == []


def test_back_of_must_exist(run):
    with pytest.raises(NotFound) as exc_info:
        run(ScoreService.create_score(ScoreCreate(title="baum", back_of=1234)))
    assert exc_info.value.field == "backOf"


def test_update_replaces_all_fields(run, book):
    created = run(
        ScoreService.create_score(
            ScoreCreate(
                title="baum",
                alias=["strauch"],
                composers=["X"],
                location=Page(book=book.id, begin=PageNumber(number=1)),
            )
        )
    )
    updated = run(ScoreService.update_score(created.id, ScoreUpdate(title="strauch", genres=["Walzer"])))
    assert updated.id == created.id
    assert updated.title == "strauch"
    assert updated.genres == ["Walzer"]
    assert updated.alias == []
    assert updated.composers == []
    assert updated.location is None


def test_update_self_reference(run):
    created = run(ScoreService.create_score(ScoreCreate(title="baum")))
    with pytest.raises(SelfReference):
        run(ScoreService.update_score(created.id, ScoreUpdate(title="baum", back_of=created.id)))


def test_update_allows_mutual_back_of(run):
    front = run(ScoreService.create_score(ScoreCreate(title="front")))
    back = run(ScoreService.create_score(ScoreCreate(title="back", back_of=front.id)))
    front = run(ScoreService.update_score(front.id, ScoreUpdate(title="front", back_of=back.id)))
    assert front.back_of == back.id
    assert back.back_of == front.id


def test_update_missing_score(run):
    with pytest.raises(NotFound):
        run(ScoreService.update_score(404, ScoreUpdate(title="baum")))


def test_update_rejects_mismatched_body_id(run):
    created = run(ScoreService.create_score(ScoreCreate(title="baum")))
    with pytest.raises(IdNotAllowed):
        run(ScoreService.update_score(created.id, ScoreUpdate(id=created.id + 1, title="baum")))
    same = run(ScoreService.update_score(created.id, ScoreUpdate(id=created.id, title="baum 2")))
    assert same.title == "baum 2"


def test_delete_twice_raises_not_found_both_times(run):
    created = run(ScoreService.create_score(ScoreCreate(title="baum")))
    run(ScoreService.delete_score(created.id))
    for _ in range(2):
        with pytest.raises(NotFound):
            run(ScoreService.delete_score(created.id))
    with pytest.raises(NotFound):
        run(ScoreService.get_score(created.id))


def test_delete_clears_back_of_references(run):
    front = run(ScoreService.create_score(ScoreCreate(title="front")))
    back = run(ScoreService.create_score(ScoreCreate(title="back", back_of=front.id)))
    run(ScoreService.delete_score(front.id))
    assert run(ScoreService.get_score(back.id)).back_of is None


def test_overlapping_location_is_flagged(run, book, caplog):
    first = run(
        ScoreService.create_score(
            ScoreCreate(
                title="front",
                location=Page(book=book.id, begin=PageNumber(number=1), end=PageNumber(number=2)),
            )
        )
    )
    with caplog.at_level(logging.WARNING, logger="score_archive_api.app.services.score_service"):
        second = run(
            ScoreService.create_score(
                ScoreCreate(title="back", location=Page(book=book.id, begin=PageNumber(number=2)))
            )
        )
    assert second.id is not None
    assert any(
        record.levelno == logging.WARNING and f"overlaps scores [{first.id}]" in record.getMessage()
        for record in caplog.records
    )
