"""SQLite connection and schema management."""

import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS categories (
        name TEXT PRIMARY KEY,
        weight REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        category TEXT,
        weight REAL NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todos (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        text TEXT NOT NULL,
        completed BOOLEAN NOT NULL DEFAULT 0,
        category TEXT NOT NULL,
        priority REAL NOT NULL,
        time_required REAL NOT NULL DEFAULT 1,
        value REAL NOT NULL,
        deadline INTEGER,
        created_at INTEGER NOT NULL,
        FOREIGN KEY (category) REFERENCES categories(name)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_dependencies (
        todo_id INTEGER NOT NULL,
        depends_on_id INTEGER NOT NULL,
        PRIMARY KEY (todo_id, depends_on_id),
        FOREIGN KEY (todo_id) REFERENCES todos(id) ON DELETE CASCADE,
        FOREIGN KEY (depends_on_id) REFERENCES todos(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS migrations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        applied_at INTEGER NOT NULL
    )
    """,
]

# Applied once each, in order, and recorded in the migrations table
MIGRATIONS: list[tuple[str, list[str]]] = [
    (
        "add_project_relation",
        ["ALTER TABLE todos ADD COLUMN project_id INTEGER REFERENCES projects(id) ON DELETE SET NULL"],
    ),
    (
        "default_time_required",
        ["UPDATE todos SET time_required = 1 WHERE time_required IS NULL OR time_required <= 0"],
    ),
]


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection with dict-like rows and foreign keys enforced."""
    if str(db_path) != ":memory:":
        Path(db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
        db_path = Path(db_path).expanduser()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def applied_migrations(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute("SELECT name FROM migrations ORDER BY id").fetchall()
    return [row["name"] for row in rows]


def initialize(conn: sqlite3.Connection) -> None:
    """Create tables and apply pending migrations."""
    with conn:
        for statement in SCHEMA:
            conn.execute(statement)

    done = set(applied_migrations(conn))
    for name, statements in MIGRATIONS:
        if name in done:
            continue
        logger.debug(f"Applying migration {name}")
        with conn:
            for statement in statements:
                conn.execute(statement)
            conn.execute(
                "INSERT INTO migrations (name, applied_at) VALUES (?, ?)",
                (name, int(time.time() * 1000)),
            )
