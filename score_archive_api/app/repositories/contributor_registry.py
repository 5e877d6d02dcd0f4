"""
Global registry of composers, arrangers and publishers.

Every contributor name is stored once per kind, across all scores.
Scores link to registry rows through association tables, so two
scores naming the same composer reference the same ``composers`` row.
"""

import sqlite3
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ContributorKind:
    """Table layout of one contributor kind."""

    table: str
    link_table: str
    link_column: str


CONTRIBUTOR_KINDS: Dict[str, ContributorKind] = {
    "composers": ContributorKind("composers", "score_composers", "composer_id"),
    "arrangers": ContributorKind("arrangers", "score_arrangers", "arranger_id"),
    "publishers": ContributorKind("publishers", "score_publishers", "publisher_id"),
}


class ContributorRegistry:
    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor

    def resolve(self, kind: str, name: str) -> int:
        """Return the registry id for ``name``, registering it on first use."""
        layout = CONTRIBUTOR_KINDS[kind]
        self.cursor.execute(
            f"INSERT OR IGNORE INTO {layout.table} (name) VALUES (?)",
            (name,),
        )
        row = self.cursor.execute(
            f"SELECT id FROM {layout.table} WHERE name = ?",
            (name,),
        ).fetchone()
        return row["id"]

    def link(self, kind: str, score_id: int, names: List[str]) -> None:
        """Replace the contributors of ``kind`` linked to a score."""
        layout = CONTRIBUTOR_KINDS[kind]
        self.cursor.execute(f"DELETE FROM {layout.link_table} WHERE score_id = ?", (score_id,))
        for name in names:
            contributor_id = self.resolve(kind, name)
            self.cursor.execute(
                f"INSERT OR IGNORE INTO {layout.link_table} (score_id, {layout.link_column}) VALUES (?, ?)",
                (score_id, contributor_id),
            )

    def names_for(self, kind: str, score_id: int) -> List[str]:
        layout = CONTRIBUTOR_KINDS[kind]
        rows = self.cursor.execute(
            f"""
            SELECT c.name FROM {layout.table} c
            JOIN {layout.link_table} l ON l.{layout.link_column} = c.id
            WHERE l.score_id = ?
            ORDER BY c.name
            """,
            (score_id,),
        ).fetchall()
        return [row["name"] for row in rows]
