"""SQLite category repository adapter."""

import sqlite3

from pughtodo.core.tasks import Category

UPDATABLE_FIELDS = ("name", "weight")


class SqliteCategoryRepository:
    """Implements CategoryRepository protocol."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def find_all(self) -> list[Category]:
        rows = self.conn.execute("SELECT name, weight FROM categories ORDER BY name").fetchall()
        return [Category(row["name"], row["weight"]) for row in rows]

    def find_by_name(self, name: str) -> Category | None:
        row = self.conn.execute("SELECT name, weight FROM categories WHERE name = ?", (name,)).fetchone()
        return Category(row["name"], row["weight"]) if row else None

    def create(self, category: Category) -> None:
        with self.conn:
            self.conn.execute(
                "INSERT INTO categories (name, weight) VALUES (?, ?)",
                (category.name, category.weight),
            )

    def update(self, name: str, fields: dict) -> bool:
        updates = {f: v for f, v in fields.items() if f in UPDATABLE_FIELDS and v is not None}
        if not updates:
            return False

        current = self.find_by_name(name)
        if current is None:
            return False

        new_name = updates.get("name", name)
        weight = updates.get("weight", current.weight)
        with self.conn:
            if new_name == name:
                self.conn.execute("UPDATE categories SET weight = ? WHERE name = ?", (weight, name))
                return True
            # Insert before moving references so the foreign key always resolves
            self.conn.execute("INSERT INTO categories (name, weight) VALUES (?, ?)", (new_name, weight))
            self.conn.execute("UPDATE todos SET category = ? WHERE category = ?", (new_name, name))
            self.conn.execute("UPDATE projects SET category = ? WHERE category = ?", (new_name, name))
            self.conn.execute("DELETE FROM categories WHERE name = ?", (name,))
        return True

    def delete(self, name: str) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM categories WHERE name = ?", (name,))
        return cur.rowcount > 0

    def todo_count(self, name: str) -> int:
        row = self.conn.execute("SELECT COUNT(*) AS count FROM todos WHERE category = ?", (name,)).fetchone()
        return row["count"]
