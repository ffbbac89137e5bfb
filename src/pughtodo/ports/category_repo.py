"""Category repository interface."""

from typing import Protocol

from pughtodo.core.tasks import Category


class CategoryRepository(Protocol):
    """Interface for storing categories."""

    def find_all(self) -> list[Category]:
        ...

    def find_by_name(self, name: str) -> Category | None:
        ...

    def create(self, category: Category) -> None:
        ...

    def update(self, name: str, fields: dict) -> bool:
        ...

    def delete(self, name: str) -> bool:
        ...

    def todo_count(self, name: str) -> int:
        """Number of todos filed under the category."""
        ...
