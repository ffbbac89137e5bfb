"""SQLite project repository adapter."""

import sqlite3

from pughtodo.core.tasks import Project

UPDATABLE_FIELDS = ("name", "description", "category", "weight")


def row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        category=row["category"] or "",
        weight=row["weight"],
    )


class SqliteProjectRepository:
    """Implements ProjectRepository protocol."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def find_all(self) -> list[Project]:
        rows = self.conn.execute("SELECT * FROM projects ORDER BY id").fetchall()
        return [row_to_project(row) for row in rows]

    def find_by_id(self, project_id: int) -> Project | None:
        row = self.conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
        return row_to_project(row) if row else None

    def create(self, project: Project) -> int:
        with self.conn:
            cur = self.conn.execute(
                "INSERT INTO projects (name, description, category, weight) VALUES (?, ?, ?, ?)",
                (project.name, project.description, project.category, project.weight),
            )
        return cur.lastrowid

    def update(self, project_id: int, fields: dict) -> bool:
        columns = [f for f in fields if f in UPDATABLE_FIELDS]
        if not columns:
            return False

        set_clause = ", ".join(f"{c} = ?" for c in columns)
        with self.conn:
            cur = self.conn.execute(
                f"UPDATE projects SET {set_clause} WHERE id = ?",
                (*[fields[c] for c in columns], project_id),
            )
        return cur.rowcount > 0

    def delete(self, project_id: int) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return cur.rowcount > 0
