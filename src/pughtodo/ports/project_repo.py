"""Project repository interface."""

from typing import Protocol

from pughtodo.core.tasks import Project


class ProjectRepository(Protocol):
    """Interface for storing projects."""

    def find_all(self) -> list[Project]:
        ...

    def find_by_id(self, project_id: int) -> Project | None:
        ...

    def create(self, project: Project) -> int:
        """Insert a project (its id is ignored) and return the new id."""
        ...

    def update(self, project_id: int, fields: dict) -> bool:
        ...

    def delete(self, project_id: int) -> bool:
        ...
