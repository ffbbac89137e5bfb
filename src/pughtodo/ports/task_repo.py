"""Task repository interface."""

from typing import Protocol

from pughtodo.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for storing and loading todos from any backend."""

    def create(self, task: Task) -> int:
        """Insert a task (its id is ignored) and return the new id."""
        ...

    def add_dependencies(self, task_id: int, depends_on: list[int]) -> None:
        """Record that task_id depends on each id in depends_on."""
        ...

    def get_dependencies(self, task_id: int) -> list[int]:
        ...

    def find_all(self, category: str | None = None) -> list[Task]:
        """Open tasks with project and dependency ids resolved."""
        ...

    def find_by_id(self, task_id: int) -> Task | None:
        ...

    def mark_complete(self, task_id: int) -> bool:
        ...

    def update(self, task_id: int, fields: dict) -> bool:
        """Update the given columns. Returns False if nothing changed."""
        ...

    def delete(self, task_id: int) -> bool:
        ...
