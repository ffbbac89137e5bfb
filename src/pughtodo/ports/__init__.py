"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .category_repo import CategoryRepository
from .project_repo import ProjectRepository

__all__ = [
    "TaskRepository",
    "CategoryRepository",
    "ProjectRepository",
]
