"""Service layer between the CLI and storage.

Validates input, resolves references, and hands complete task records to
the scoring core. Storage is reached only through the repository ports.
"""

import logging
import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

from .adapters import (
    SqliteCategoryRepository,
    SqliteProjectRepository,
    SqliteTaskRepository,
    connect,
    initialize,
)
from .config import Config
from .core.ordering import rank_tasks
from .core.scoring import compute_score
from .core.tasks import Category, Project, Task, to_millis
from .ports import CategoryRepository, ProjectRepository, TaskRepository

logger = logging.getLogger(__name__)

MAX_TIME_REQUIRED = 100
MAX_WEIGHT = 5


class TodoError(Exception):
    """Base class for errors reported to the user."""

    pass


class ValidationError(TodoError, ValueError):
    """Raised when input is out of range or inconsistent."""

    pass


class NotFoundError(TodoError, LookupError):
    """Raised when a referenced todo, category or project does not exist."""

    pass


def _check_range(name: str, value: float | None, low: float, high: float) -> None:
    if value is not None and not (low <= value <= high):
        raise ValidationError(f"{name} must be between {low:g} and {high:g}")


def _check_time_required(hours: float | None) -> None:
    if hours is not None and not (0 < hours <= MAX_TIME_REQUIRED):
        raise ValidationError(f"Time required must be between 0 and {MAX_TIME_REQUIRED} hours")


def _check_project_weight(weight: float | None) -> None:
    if weight is not None and not (0 < weight <= MAX_WEIGHT):
        raise ValidationError(f"Project weight must be greater than 0 and at most {MAX_WEIGHT}")


def _check_category_name(name: str) -> None:
    if not name.strip():
        raise ValidationError("Category name cannot be empty")


class TodoService:
    """Create, rank, and maintain todos."""

    def __init__(
        self,
        tasks: TaskRepository,
        categories: CategoryRepository,
        projects: ProjectRepository,
    ):
        self.tasks = tasks
        self.categories = categories
        self.projects = projects

    def _require_category(self, name: str) -> None:
        if not self.categories.find_by_name(name):
            raise ValidationError(f"Category '{name}' does not exist")

    def _require_project(self, project_id: int) -> Project:
        project = self.projects.find_by_id(project_id)
        if not project:
            raise NotFoundError(f"Project #{project_id} not found")
        return project

    def _require_dependencies(self, dependencies: list[int], task_id: int | None = None) -> None:
        for dep_id in dependencies:
            if dep_id == task_id:
                raise ValidationError(f"Todo #{task_id} cannot depend on itself")
            if not self.tasks.find_by_id(dep_id):
                raise NotFoundError(f"Dependency todo #{dep_id} not found")

    def create_todo(
        self,
        text: str,
        category: str,
        priority: float,
        value: float,
        time_required: float = 1,
        deadline: datetime | None = None,
        project_id: int | None = None,
        dependencies: list[int] | None = None,
        created_at: datetime | None = None,
    ) -> int:
        """Validate and store a new todo. Returns its id."""
        _check_range("Priority", priority, 0, 10)
        _check_range("Value", value, 0, 10)
        _check_time_required(time_required)
        self._require_category(category)
        project = self._require_project(project_id) if project_id is not None else None
        dependencies = list(dict.fromkeys(dependencies or []))
        self._require_dependencies(dependencies)

        task = Task(
            id=0,
            text=text,
            category=category,
            priority=priority,
            value=value,
            time_required=time_required,
            created_at=created_at or datetime.now(timezone.utc),
            deadline=deadline,
            project=project,
            dependencies=dependencies,
        )
        task_id = self.tasks.create(task)
        logger.info(f"Created todo #{task_id} in {category}")
        return task_id

    def list_todos(
        self,
        category: str | None = None,
        sort_by_score: bool = True,
        now: datetime | None = None,
    ) -> list[Task]:
        """Open todos, scored against one "now" and ordered for display."""
        now = now or datetime.now(timezone.utc)
        ranked = rank_tasks(self.tasks.find_all(category), now, sort_by_score)
        logger.debug(f"Ranked {len(ranked)} todos (sort_by_score={sort_by_score})")
        return ranked

    def get_todo(self, task_id: int, now: datetime | None = None) -> Task | None:
        """A single todo with its current (unclamped) score attached."""
        task = self.tasks.find_by_id(task_id)
        if task is None:
            return None
        return replace(task, score=compute_score(task, now or datetime.now(timezone.utc)))

    def complete_todo(self, task_id: int) -> bool:
        return self.tasks.mark_complete(task_id)

    def update_todo(self, task_id: int, updates: dict, dependencies: list[int] | None = None) -> bool:
        """
        Apply field updates, and optionally new dependencies, to a todo.

        Keys: text, category, priority, value, time_required, deadline
        (datetime, or None to clear), project_id (int, or None to detach).
        Everything is validated before anything is written.
        Returns False if the todo does not exist or nothing changed.
        """
        if not self.tasks.find_by_id(task_id):
            return False

        _check_range("Priority", updates.get("priority"), 0, 10)
        _check_range("Value", updates.get("value"), 0, 10)
        _check_time_required(updates.get("time_required"))
        if updates.get("category") is not None:
            self._require_category(updates["category"])
        if updates.get("project_id") is not None:
            self._require_project(updates["project_id"])
        dependencies = list(dict.fromkeys(dependencies or []))
        self._require_dependencies(dependencies, task_id)

        fields = dict(updates)
        if "deadline" in fields:
            fields["deadline"] = to_millis(fields["deadline"])
        changed = self.tasks.update(task_id, fields) if fields else False
        if dependencies:
            self.tasks.add_dependencies(task_id, dependencies)
            changed = True
        return changed

    def add_dependencies(self, task_id: int, dependencies: list[int]) -> None:
        if not self.tasks.find_by_id(task_id):
            raise NotFoundError(f"Todo #{task_id} not found")
        self._require_dependencies(dependencies, task_id)
        self.tasks.add_dependencies(task_id, dependencies)

    def delete_todo(self, task_id: int) -> bool:
        return self.tasks.delete(task_id)


class CategoryService:
    """Maintain categories and their weights."""

    def __init__(self, categories: CategoryRepository):
        self.categories = categories

    def list_categories(self) -> list[Category]:
        return self.categories.find_all()

    def get_category(self, name: str) -> Category | None:
        return self.categories.find_by_name(name)

    def create_category(self, name: str, weight: float = 1) -> None:
        _check_category_name(name)
        _check_range("Weight", weight, 0, MAX_WEIGHT)
        if self.categories.find_by_name(name):
            raise ValidationError(f"Category '{name}' already exists")
        self.categories.create(Category(name, weight))

    def update_category(self, name: str, new_name: str | None = None, weight: float | None = None) -> bool:
        if not self.categories.find_by_name(name):
            raise NotFoundError(f"Category '{name}' not found")
        _check_range("Weight", weight, 0, MAX_WEIGHT)
        if new_name is not None:
            _check_category_name(new_name)
            if new_name != name and self.categories.find_by_name(new_name):
                raise ValidationError(f"Category '{new_name}' already exists")
        return self.categories.update(name, {"name": new_name, "weight": weight})

    def update_category_weight(self, name: str, weight: float) -> bool:
        return self.update_category(name, weight=weight)

    def delete_category(self, name: str) -> bool:
        if not self.categories.find_by_name(name):
            raise NotFoundError(f"Category '{name}' not found")
        count = self.categories.todo_count(name)
        if count > 0:
            raise ValidationError(f"Cannot delete category '{name}' because it has {count} todo(s)")
        return self.categories.delete(name)


class ProjectService:
    """Maintain projects, whose weight multiplies their todos' scores."""

    def __init__(self, projects: ProjectRepository, categories: CategoryRepository):
        self.projects = projects
        self.categories = categories

    def list_projects(self) -> list[Project]:
        return self.projects.find_all()

    def get_project(self, project_id: int) -> Project | None:
        return self.projects.find_by_id(project_id)

    def create_project(self, name: str, category: str, weight: float = 1, description: str = "") -> int:
        _check_project_weight(weight)
        if not self.categories.find_by_name(category):
            raise ValidationError(f"Category '{category}' does not exist")
        return self.projects.create(Project(0, name, description, category, weight))

    def update_project(self, project_id: int, updates: dict) -> bool:
        if not self.projects.find_by_id(project_id):
            raise NotFoundError(f"Project #{project_id} not found")
        _check_project_weight(updates.get("weight"))
        if updates.get("category") is not None and not self.categories.find_by_name(updates["category"]):
            raise ValidationError(f"Category '{updates['category']}' does not exist")
        return self.projects.update(project_id, {k: v for k, v in updates.items() if v is not None})

    def delete_project(self, project_id: int) -> bool:
        return self.projects.delete(project_id)


@dataclass
class Services:
    """Services wired to one open database."""

    todos: TodoService
    categories: CategoryService
    projects: ProjectService
    conn: sqlite3.Connection

    def close(self) -> None:
        self.conn.close()


def open_services(db_path: Path | str) -> Services:
    """Open (and migrate) the database and wire up the services."""
    conn = connect(db_path)
    initialize(conn)
    task_repo = SqliteTaskRepository(conn)
    category_repo = SqliteCategoryRepository(conn)
    project_repo = SqliteProjectRepository(conn)
    return Services(
        todos=TodoService(task_repo, category_repo, project_repo),
        categories=CategoryService(category_repo),
        projects=ProjectService(project_repo, category_repo),
        conn=conn,
    )


def get_services(config: Config) -> Services:
    """Resolve the database from config."""
    return open_services(config.database)
