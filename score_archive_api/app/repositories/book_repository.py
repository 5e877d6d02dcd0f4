"""SQL access for the ``books`` table."""

import sqlite3
from typing import Optional

from ..schemas.book import BookBase, BookRead


class BookRepository:
    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor

    def insert(self, data: BookBase) -> int:
        self.cursor.execute(
            "INSERT INTO books (name, annotation) VALUES (?, ?)",
            (data.name, data.annotation),
        )
        return self.cursor.lastrowid

    def update(self, book_id: int, data: BookBase) -> bool:
        self.cursor.execute(
            "UPDATE books SET name = ?, annotation = ? WHERE id = ?",
            (data.name, data.annotation, book_id),
        )
        return self.cursor.rowcount > 0

    def get(self, book_id: int) -> Optional[BookRead]:
        row = self.cursor.execute(
            "SELECT id, name, annotation FROM books WHERE id = ?",
            (book_id,),
        ).fetchone()
        if not row:
            return None
        return BookRead(id=row["id"], name=row["name"], annotation=row["annotation"])

    def exists(self, book_id: int) -> bool:
        row = self.cursor.execute("SELECT 1 FROM books WHERE id = ?", (book_id,)).fetchone()
        return row is not None

    def delete(self, book_id: int) -> bool:
        self.cursor.execute("DELETE FROM books WHERE id = ?", (book_id,))
        return self.cursor.rowcount > 0
