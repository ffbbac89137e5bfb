"""Adapters - I/O implementations of ports."""

from .sqlite_db import connect, initialize
from .sqlite_tasks import SqliteTaskRepository
from .sqlite_categories import SqliteCategoryRepository
from .sqlite_projects import SqliteProjectRepository

__all__ = [
    "connect",
    "initialize",
    "SqliteTaskRepository",
    "SqliteCategoryRepository",
    "SqliteProjectRepository",
]
