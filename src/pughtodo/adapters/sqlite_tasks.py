"""SQLite task repository adapter."""

import logging
import sqlite3

from pughtodo.core.tasks import Project, Task, to_millis

from .sqlite_projects import row_to_project

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "text",
    "category",
    "priority",
    "time_required",
    "value",
    "deadline",
    "project_id",
)


class SqliteTaskRepository:
    """
    SQLite-backed todos.

    Implements TaskRepository protocol. Resolves each todo's project and
    dependency ids so the scoring core gets complete records.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _projects_by_id(self) -> dict[int, Project]:
        rows = self.conn.execute("SELECT * FROM projects").fetchall()
        return {row["id"]: row_to_project(row) for row in rows}

    def _dependency_map(self) -> dict[int, list[int]]:
        deps: dict[int, list[int]] = {}
        rows = self.conn.execute(
            "SELECT todo_id, depends_on_id FROM todo_dependencies ORDER BY todo_id, depends_on_id"
        ).fetchall()
        for row in rows:
            deps.setdefault(row["todo_id"], []).append(row["depends_on_id"])
        return deps

    def create(self, task: Task) -> int:
        with self.conn:
            cur = self.conn.execute(
                """
                INSERT INTO todos (text, category, priority, time_required, value, deadline, created_at, project_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.text,
                    task.category,
                    task.priority,
                    task.time_required,
                    task.value,
                    to_millis(task.deadline),
                    to_millis(task.created_at),
                    task.project.id if task.project else None,
                ),
            )
        task_id = cur.lastrowid
        if task.dependencies:
            self.add_dependencies(task_id, task.dependencies)
        return task_id

    def add_dependencies(self, task_id: int, depends_on: list[int]) -> None:
        with self.conn:
            self.conn.executemany(
                "INSERT OR IGNORE INTO todo_dependencies (todo_id, depends_on_id) VALUES (?, ?)",
                [(task_id, dep) for dep in depends_on],
            )

    def get_dependencies(self, task_id: int) -> list[int]:
        rows = self.conn.execute(
            "SELECT depends_on_id FROM todo_dependencies WHERE todo_id = ? ORDER BY depends_on_id",
            (task_id,),
        ).fetchall()
        return [row["depends_on_id"] for row in rows]

    def find_all(self, category: str | None = None) -> list[Task]:
        """Open todos, by id, optionally within one category."""
        query = """
            SELECT t.* FROM todos t
            JOIN categories c ON t.category = c.name
            WHERE t.completed = 0
        """
        args: tuple = ()
        if category:
            query += " AND t.category = ?"
            args = (category,)
        query += " ORDER BY t.id"

        rows = self.conn.execute(query, args).fetchall()
        projects = self._projects_by_id()
        deps = self._dependency_map()

        tasks = [
            Task.from_row(dict(row), projects.get(row["project_id"]), deps.get(row["id"], []))
            for row in rows
        ]
        logger.debug(f"Loaded {len(tasks)} open todos" + (f" in {category}" if category else ""))
        return tasks

    def find_by_id(self, task_id: int) -> Task | None:
        row = self.conn.execute("SELECT * FROM todos WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            return None
        project = None
        if row["project_id"] is not None:
            project = self._projects_by_id().get(row["project_id"])
        return Task.from_row(dict(row), project, self.get_dependencies(task_id))

    def mark_complete(self, task_id: int) -> bool:
        with self.conn:
            cur = self.conn.execute("UPDATE todos SET completed = 1 WHERE id = ?", (task_id,))
        return cur.rowcount > 0

    def update(self, task_id: int, fields: dict) -> bool:
        columns = [f for f in fields if f in UPDATABLE_FIELDS]
        if not columns:
            return False

        set_clause = ", ".join(f"{c} = ?" for c in columns)
        values = [fields[c] for c in columns]
        with self.conn:
            cur = self.conn.execute(f"UPDATE todos SET {set_clause} WHERE id = ?", (*values, task_id))
        return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM todos WHERE id = ?", (task_id,))
        return cur.rowcount > 0
