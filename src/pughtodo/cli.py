"""pughtodo CLI - a todo list ranked by Pugh score."""

import json
import logging
import sys
from datetime import date, datetime, time
from pathlib import Path

import click

from .config import SORT_MODES, load_config, Config
from .core.display import Table, format_deadline, format_dependencies, format_time, task_table
from .core.tasks import Category, Project
from .services import Services, TodoError, get_services


class AppContext:
    """Config plus services opened on first use."""

    def __init__(self, config: Config):
        self.config = config
        self._services: Services | None = None

    @property
    def services(self) -> Services:
        if self._services is None:
            self._services = get_services(self.config)
        return self._services

    def close(self) -> None:
        if self._services is not None:
            self._services.close()


def _parse_deadline(ctx, param, value: str | None) -> datetime | None:
    """ISO date (end of that day) or datetime, in local time."""
    if value is None:
        return None
    try:
        if len(value) == 10:
            parsed = datetime.combine(date.fromisoformat(value), time(23, 59))
        else:
            parsed = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an ISO date (YYYY-MM-DD) or datetime") from None
    return parsed.astimezone()


def _fail(e: Exception | str) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--db", "db_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Database file (overrides config)")
@click.pass_context
def main(ctx, debug: bool, db_path: Path | None):
    """pughtodo - todos ranked by what is most worth doing."""
    config = load_config()
    if db_path:
        config.database = db_path

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else config.log_level,
    )

    ctx.obj = AppContext(config)
    ctx.call_on_close(ctx.obj.close)


# ============== Todos ==============


@main.command()
@click.argument("text")
@click.option("--category", "-c", required=True, help="Category name")
@click.option("--priority", "-p", type=float, prompt="Priority (0-10)", help="Importance, 0-10")
@click.option("--value", "-v", type=float, prompt="Value (0-10)", help="Payoff, 0-10")
@click.option("--time", "-t", "time_required", type=float, default=1.0, show_default=True,
              help="Hours of effort")
@click.option("--deadline", "-d", callback=_parse_deadline, help="YYYY-MM-DD or ISO datetime")
@click.option("--project", "project_id", type=int, default=None, help="Project id")
@click.option("--depends-on", "dependencies", type=int, multiple=True, help="Id of a blocking todo")
@click.pass_obj
def add(app: AppContext, text: str, category: str, priority: float, value: float,
        time_required: float, deadline: datetime | None, project_id: int | None,
        dependencies: tuple[int, ...]):
    """Add a new todo."""
    try:
        todo_id = app.services.todos.create_todo(
            text=text,
            category=category,
            priority=priority,
            value=value,
            time_required=time_required,
            deadline=deadline,
            project_id=project_id,
            dependencies=list(dependencies),
        )
    except TodoError as e:
        _fail(e)
    click.echo(f"Todo #{todo_id} added successfully!")


@main.command("list")
@click.option("--category", "-c", default=None, help="Filter by category")
@click.option("--sort", "-s", "sort_mode", type=click.Choice(SORT_MODES), default=None,
              help="Sort method (default from config: score)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_todos(app: AppContext, category: str | None, sort_mode: str | None, as_json: bool):
    """List open todos, most worth doing first."""
    sort_mode = sort_mode or app.config.default_sort
    todos = app.services.todos.list_todos(category, sort_by_score=sort_mode == "score")

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in todos], indent=2))
        return

    if not todos:
        click.echo(f"No todos found in category '{category}'." if category else "No todos found.")
        return

    click.echo(task_table(todos).render())


main.add_command(list_todos, "ls")


@main.command()
@click.argument("todo_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show(app: AppContext, todo_id: int, as_json: bool):
    """Show one todo and its current score."""
    todo = app.services.todos.get_todo(todo_id)
    if not todo:
        _fail(f"Todo #{todo_id} not found")

    if as_json:
        click.echo(json.dumps(todo.to_dict(), indent=2))
        return

    status = "done" if todo.completed else "open"
    click.echo(f"#{todo.id} {todo.text} [{status}]")
    click.echo(f"  Category:   {todo.category}")
    click.echo(f"  Project:    {todo.project.name if todo.project else '-'}")
    click.echo(f"  Priority:   {todo.priority:g}")
    click.echo(f"  Value:      {todo.value:g}")
    click.echo(f"  Time:       {format_time(todo.time_required)}")
    click.echo(f"  Deadline:   {format_deadline(todo.deadline)}")
    click.echo(f"  Depends on: {format_dependencies(todo.dependencies)}")
    click.echo(f"  Score:      {todo.score:.2f}")


@main.command()
@click.argument("todo_id", type=int)
@click.pass_obj
def complete(app: AppContext, todo_id: int):
    """Mark a todo as complete."""
    if app.services.todos.complete_todo(todo_id):
        click.echo(f"Todo #{todo_id} marked as complete!")
    else:
        _fail(f"Todo #{todo_id} not found")


main.add_command(complete, "done")


@main.command()
@click.argument("todo_id", type=int)
@click.option("--text", default=None)
@click.option("--category", "-c", default=None)
@click.option("--priority", "-p", type=float, default=None)
@click.option("--value", "-v", type=float, default=None)
@click.option("--time", "-t", "time_required", type=float, default=None)
@click.option("--deadline", "-d", callback=_parse_deadline, help="YYYY-MM-DD or ISO datetime")
@click.option("--clear-deadline", is_flag=True, help="Remove the deadline")
@click.option("--project", "project_id", type=int, default=None, help="Project id")
@click.option("--no-project", is_flag=True, help="Detach from its project")
@click.option("--depends-on", "dependencies", type=int, multiple=True, help="Add a blocking todo")
@click.pass_obj
def edit(app: AppContext, todo_id: int, text, category, priority, value, time_required,
         deadline, clear_deadline: bool, project_id, no_project: bool, dependencies):
    """Modify a todo."""
    updates = {
        k: v
        for k, v in {
            "text": text,
            "category": category,
            "priority": priority,
            "value": value,
            "time_required": time_required,
            "deadline": deadline,
            "project_id": project_id,
        }.items()
        if v is not None
    }
    if clear_deadline:
        updates["deadline"] = None
    if no_project:
        updates["project_id"] = None

    if not updates and not dependencies:
        click.echo("No changes made.")
        return

    try:
        if not app.services.todos.update_todo(todo_id, updates, list(dependencies)):
            _fail(f"Todo #{todo_id} not found")
    except TodoError as e:
        _fail(e)
    click.echo(f"Todo #{todo_id} updated.")


main.add_command(edit, "modify")


@main.command()
@click.argument("todo_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def remove(app: AppContext, todo_id: int, yes: bool):
    """Remove a todo."""
    todo = app.services.todos.get_todo(todo_id)
    if not todo:
        _fail(f"Todo #{todo_id} not found")

    if not yes and not click.confirm(f'Are you sure you want to delete: "{todo.text}"?'):
        click.echo("Operation cancelled.")
        return

    app.services.todos.delete_todo(todo_id)
    click.echo("Todo deleted successfully!")


main.add_command(remove, "rm")


# ============== Categories ==============


@main.group()
def categories():
    """Manage categories."""
    pass


main.add_command(categories, "cat")


@categories.command("list")
@click.pass_obj
def categories_list(app: AppContext):
    """List all categories."""
    cats = app.services.categories.list_categories()
    if not cats:
        click.echo("No categories. Add one with 'todo categories add NAME'.")
        return

    table: Table[Category] = Table()
    table.add_column("Category", lambda c: c.name)
    table.add_column("Weight", lambda c: f"{c.weight:g}", "center")
    click.echo(table.set_data(cats).render())


@categories.command("add")
@click.argument("name")
@click.option("--weight", "-w", type=float, default=1.0, show_default=True, help="Weight, 0-5")
@click.pass_obj
def categories_add(app: AppContext, name: str, weight: float):
    """Add a new category."""
    try:
        app.services.categories.create_category(name, weight)
    except TodoError as e:
        _fail(e)
    click.echo(f"Category '{name}' added successfully with weight {weight:g}!")


@categories.command("edit")
@click.argument("name")
@click.option("--name", "new_name", default=None, help="New name")
@click.option("--weight", "-w", type=float, default=None, help="New weight, 0-5")
@click.pass_obj
def categories_edit(app: AppContext, name: str, new_name: str | None, weight: float | None):
    """Modify a category."""
    if new_name is None and weight is None:
        click.echo("No changes made.")
        return
    try:
        app.services.categories.update_category(name, new_name, weight)
    except TodoError as e:
        _fail(e)
    click.echo("Category updated successfully!")


@categories.command("weight")
@click.argument("name")
@click.argument("weight", type=float)
@click.pass_obj
def categories_weight(app: AppContext, name: str, weight: float):
    """Update a category's weight."""
    try:
        app.services.categories.update_category_weight(name, weight)
    except TodoError as e:
        _fail(e)
    click.echo(f"Updated weight for category '{name}' to {weight:g}")


@categories.command("remove")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def categories_remove(app: AppContext, name: str, yes: bool):
    """Remove a category with no todos."""
    if not app.services.categories.get_category(name):
        _fail(f"Category '{name}' not found")

    if not yes and not click.confirm(f"Are you sure you want to delete category '{name}'?"):
        click.echo("Operation cancelled.")
        return

    try:
        app.services.categories.delete_category(name)
    except TodoError as e:
        _fail(e)
    click.echo("Category deleted successfully!")


# ============== Projects ==============


@main.group()
def projects():
    """Manage projects."""
    pass


@projects.command("list")
@click.pass_obj
def projects_list(app: AppContext):
    """List all projects."""
    items = app.services.projects.list_projects()
    if not items:
        click.echo("No projects.")
        return

    table: Table[Project] = Table(padding=2)
    table.add_column("ID", lambda p: str(p.id), "center")
    table.add_column("Project", lambda p: p.name)
    table.add_column("Category", lambda p: p.category or "-")
    table.add_column("Weight", lambda p: f"{p.weight:g}", "center")
    table.add_column("Description", lambda p: p.description)
    click.echo(table.set_data(items).render())


@projects.command("add")
@click.argument("name")
@click.option("--category", "-c", required=True, help="Category name")
@click.option("--weight", "-w", type=float, default=1.0, show_default=True, help="Score multiplier, up to 5")
@click.option("--description", default="", help="Short description")
@click.pass_obj
def projects_add(app: AppContext, name: str, category: str, weight: float, description: str):
    """Add a new project."""
    try:
        project_id = app.services.projects.create_project(name, category, weight, description)
    except TodoError as e:
        _fail(e)
    click.echo(f"Project #{project_id} '{name}' added.")


@projects.command("edit")
@click.argument("project_id", type=int)
@click.option("--name", default=None)
@click.option("--description", default=None)
@click.option("--category", "-c", default=None)
@click.option("--weight", "-w", type=float, default=None)
@click.pass_obj
def projects_edit(app: AppContext, project_id: int, name, description, category, weight):
    """Modify a project."""
    updates = {"name": name, "description": description, "category": category, "weight": weight}
    if all(v is None for v in updates.values()):
        click.echo("No changes made.")
        return
    try:
        app.services.projects.update_project(project_id, updates)
    except TodoError as e:
        _fail(e)
    click.echo(f"Project #{project_id} updated.")


@projects.command("remove")
@click.argument("project_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def projects_remove(app: AppContext, project_id: int, yes: bool):
    """Remove a project. Its todos are kept, detached."""
    project = app.services.projects.get_project(project_id)
    if not project:
        _fail(f"Project #{project_id} not found")

    if not yes and not click.confirm(f"Are you sure you want to delete project '{project.name}'?"):
        click.echo("Operation cancelled.")
        return

    app.services.projects.delete_project(project_id)
    click.echo("Project deleted successfully!")


if __name__ == "__main__":
    main()
