"""
SQL access for scores.

A score is spread over the ``scores`` table (scalar fields and the
embedded location), the genre/alias/sub-title child tables and the
contributor association tables.  ``ScoreRepository`` writes and reads
the whole aggregate; callers never see the individual tables.
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..schemas.page import Page, PageNumber
from ..schemas.score import ScoreBase, ScoreRead, SearchField
from .contributor_registry import CONTRIBUTOR_KINDS, ContributorRegistry

# Each search field maps to exactly one attribute.  ``:needle`` is the
# case-folded search value; ``casefold`` is registered on every
# connection by ``core.db.get_connection``.
SEARCH_FIELD_SQL: Dict[SearchField, str] = {
    SearchField.TITLE: "instr(casefold(s.title), :needle) > 0",
    SearchField.ANNOTATION: "instr(casefold(s.annotation), :needle) > 0",
    SearchField.GENRE: (
        "EXISTS (SELECT 1 FROM score_genres g "
        "WHERE g.score_id = s.id AND instr(casefold(g.genre), :needle) > 0)"
    ),
    SearchField.ALIAS: (
        "EXISTS (SELECT 1 FROM score_aliases a "
        "WHERE a.score_id = s.id AND instr(casefold(a.alias), :needle) > 0)"
    ),
    SearchField.SUB_TITLE: (
        "EXISTS (SELECT 1 FROM score_sub_titles st "
        "WHERE st.score_id = s.id AND instr(casefold(st.sub_title), :needle) > 0)"
    ),
    SearchField.COMPOSER: (
        "EXISTS (SELECT 1 FROM score_composers sc JOIN composers c ON c.id = sc.composer_id "
        "WHERE sc.score_id = s.id AND instr(casefold(c.name), :needle) > 0)"
    ),
    SearchField.ARRANGER: (
        "EXISTS (SELECT 1 FROM score_arrangers sa JOIN arrangers ar ON ar.id = sa.arranger_id "
        "WHERE sa.score_id = s.id AND instr(casefold(ar.name), :needle) > 0)"
    ),
    SearchField.PUBLISHER: (
        "EXISTS (SELECT 1 FROM score_publishers sp JOIN publishers p ON p.id = sp.publisher_id "
        "WHERE sp.score_id = s.id AND instr(casefold(p.name), :needle) > 0)"
    ),
}

_SCORE_COLUMNS = (
    "id, title, grade, annotation, back_of, location_book, "
    "begin_prefix, begin_number, begin_suffix, end_prefix, end_number, end_suffix"
)


def _location_params(location: Optional[Page]) -> Tuple[Any, ...]:
    if location is None:
        return (None,) * 7
    end = location.end
    return (
        location.book,
        location.begin.prefix,
        location.begin.number,
        location.begin.suffix,
        end.prefix if end else None,
        end.number if end else None,
        end.suffix if end else None,
    )


def _row_to_location(row: sqlite3.Row) -> Optional[Page]:
    if row["location_book"] is None:
        return None
    end = None
    if row["end_number"] is not None:
        end = PageNumber(prefix=row["end_prefix"], number=row["end_number"], suffix=row["end_suffix"])
    return Page(
        book=row["location_book"],
        begin=PageNumber(prefix=row["begin_prefix"], number=row["begin_number"], suffix=row["begin_suffix"]),
        end=end,
    )


class ScoreRepository:
    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor
        self.registry = ContributorRegistry(cursor)

    # -- writes ---------------------------------------------------------

    def insert(self, data: ScoreBase) -> int:
        self.cursor.execute(
            """
            INSERT INTO scores (title, grade, annotation, back_of, location_book,
                                begin_prefix, begin_number, begin_suffix,
                                end_prefix, end_number, end_suffix)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (data.title, data.grade, data.annotation, data.back_of, *_location_params(data.location)),
        )
        score_id = self.cursor.lastrowid
        self._write_children(score_id, data)
        return score_id

    def replace(self, score_id: int, data: ScoreBase) -> bool:
        self.cursor.execute(
            """
            UPDATE scores
            SET title = ?, grade = ?, annotation = ?, back_of = ?, location_book = ?,
                begin_prefix = ?, begin_number = ?, begin_suffix = ?,
                end_prefix = ?, end_number = ?, end_suffix = ?
            WHERE id = ?
            """,
            (data.title, data.grade, data.annotation, data.back_of, *_location_params(data.location), score_id),
        )
        if self.cursor.rowcount == 0:
            return False
        self._write_children(score_id, data)
        return True

    def delete(self, score_id: int) -> bool:
        self._delete_children(score_id)
        self.cursor.execute("DELETE FROM scores WHERE id = ?", (score_id,))
        return self.cursor.rowcount > 0

    def clear_back_of(self, score_id: int) -> List[int]:
        """Detach every score printed on the back of ``score_id``."""
        rows = self.cursor.execute("SELECT id FROM scores WHERE back_of = ?", (score_id,)).fetchall()
        self.cursor.execute("UPDATE scores SET back_of = NULL WHERE back_of = ?", (score_id,))
        return [row["id"] for row in rows]

    def clear_locations_in_book(self, book_id: int) -> List[int]:
        """Remove the location of every score placed in ``book_id``."""
        rows = self.cursor.execute("SELECT id FROM scores WHERE location_book = ?", (book_id,)).fetchall()
        self.cursor.execute(
            """
            UPDATE scores
            SET location_book = NULL, begin_prefix = NULL, begin_number = NULL, begin_suffix = NULL,
                end_prefix = NULL, end_number = NULL, end_suffix = NULL
            WHERE location_book = ?
            """,
            (book_id,),
        )
        return [row["id"] for row in rows]

    def _write_children(self, score_id: int, data: ScoreBase) -> None:
        self._delete_children(score_id, contributors=False)
        self.cursor.executemany(
            "INSERT INTO score_genres (score_id, genre) VALUES (?, ?)",
            [(score_id, genre) for genre in data.genres],
        )
        self.cursor.executemany(
            "INSERT INTO score_aliases (score_id, alias) VALUES (?, ?)",
            [(score_id, alias) for alias in data.alias],
        )
        self.cursor.executemany(
            "INSERT INTO score_sub_titles (score_id, position, sub_title) VALUES (?, ?, ?)",
            [(score_id, position, sub_title) for position, sub_title in enumerate(data.sub_titles)],
        )
        for kind in CONTRIBUTOR_KINDS:
            self.registry.link(kind, score_id, getattr(data, kind))

    def _delete_children(self, score_id: int, contributors: bool = True) -> None:
        tables = ["score_genres", "score_aliases", "score_sub_titles"]
        if contributors:
            tables.extend(layout.link_table for layout in CONTRIBUTOR_KINDS.values())
        for table in tables:
            self.cursor.execute(f"DELETE FROM {table} WHERE score_id = ?", (score_id,))

    # -- reads ----------------------------------------------------------

    def exists(self, score_id: int) -> bool:
        row = self.cursor.execute("SELECT 1 FROM scores WHERE id = ?", (score_id,)).fetchone()
        return row is not None

    def get(self, score_id: int) -> Optional[ScoreRead]:
        row = self.cursor.execute(
            f"SELECT {_SCORE_COLUMNS} FROM scores WHERE id = ?",
            (score_id,),
        ).fetchone()
        if not row:
            return None
        return self._row_to_score(row)

    def list_in_book(self, book_id: int) -> List[ScoreRead]:
        """Scores located in ``book_id``, in no particular order."""
        rows = self.cursor.execute(
            f"SELECT {_SCORE_COLUMNS} FROM scores WHERE location_book = ?",
            (book_id,),
        ).fetchall()
        return [self._row_to_score(row) for row in rows]

    def search(
        self,
        fields: Iterable[SearchField],
        value: str,
        descending: bool,
        limit: int,
        offset: int,
    ) -> Tuple[List[ScoreRead], int]:
        """Return one page of scores matching ``value`` in any of ``fields``.

        Results are ordered by case-folded title (reversed when
        ``descending``), then by the raw title, with the id as ascending
        tiebreaker.  The second element is the total
        number of matches across all pages.
        """
        clauses = [SEARCH_FIELD_SQL[field] for field in sorted(fields, key=lambda f: f.value)]
        if not clauses:
            return [], 0
        where = " OR ".join(f"({clause})" for clause in clauses)
        params = {"needle": value.casefold(), "limit": limit, "offset": offset}
        total = self.cursor.execute(
            f"SELECT COUNT(*) AS total FROM scores s WHERE {where}",
            params,
        ).fetchone()["total"]
        direction = "DESC" if descending else "ASC"
        rows = self.cursor.execute(
            f"""
            SELECT {_SCORE_COLUMNS}
            FROM scores s
            WHERE {where}
            ORDER BY casefold(s.title) {direction}, s.title {direction}, s.id ASC
            LIMIT :limit OFFSET :offset
            """,
            params,
        ).fetchall()
        return [self._row_to_score(row) for row in rows], total

    def _row_to_score(self, row: sqlite3.Row) -> ScoreRead:
        score_id = row["id"]
        genres = self.cursor.execute(
            "SELECT genre FROM score_genres WHERE score_id = ? ORDER BY genre",
            (score_id,),
        ).fetchall()
        aliases = self.cursor.execute(
            "SELECT alias FROM score_aliases WHERE score_id = ? ORDER BY alias",
            (score_id,),
        ).fetchall()
        sub_titles = self.cursor.execute(
            "SELECT sub_title FROM score_sub_titles WHERE score_id = ? ORDER BY position",
            (score_id,),
        ).fetchall()
        return ScoreRead(
            id=score_id,
            title=row["title"],
            genres=[r["genre"] for r in genres],
            composers=self.registry.names_for("composers", score_id),
            arrangers=self.registry.names_for("arrangers", score_id),
            publishers=self.registry.names_for("publishers", score_id),
            grade=row["grade"],
            alias=[r["alias"] for r in aliases],
            sub_titles=[r["sub_title"] for r in sub_titles],
            annotation=row["annotation"],
            back_of=row["back_of"],
            location=_row_to_location(row),
        )
