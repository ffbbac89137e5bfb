"""Pure formatting helpers for task listings - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Generic, TypeVar

from .tasks import Task

T = TypeVar("T")


def format_deadline(deadline: datetime | None, as_of: date | None = None) -> str:
    """Today / Tomorrow / ISO date, in local time."""
    if not deadline:
        return "No deadline"

    as_of = as_of or date.today()
    day = deadline.astimezone().date() if deadline.tzinfo else deadline.date()

    if day == as_of:
        return "Today"
    if day == as_of + timedelta(days=1):
        return "Tomorrow"
    return day.isoformat()


def format_time(hours: float | None) -> str:
    """Effort as whole hours, or minutes below one hour."""
    if not hours or hours <= 0:
        return "1h"
    if hours >= 1:
        return f"{round(hours)}h"
    return f"{round(hours * 60)}m"


def format_dependencies(dependencies: list[int]) -> str:
    if not dependencies:
        return "-"
    return "#" + ",".join(str(d) for d in dependencies)


def _num(n: float) -> str:
    # 5.0 -> "5", 2.5 -> "2.5"
    return f"{n:g}"


@dataclass
class Column(Generic[T]):
    header: str
    format: Callable[[T], str]
    align: str = "left"


class Table(Generic[T]):
    """Plain-text table with aligned columns."""

    def __init__(self, padding: int = 1):
        self.padding = padding
        self.columns: list[Column[T]] = []
        self.rows: list[T] = []

    def add_column(self, header: str, format: Callable[[T], str], align: str = "left") -> "Table[T]":
        self.columns.append(Column(header, format, align))
        return self

    def set_data(self, rows: list[T]) -> "Table[T]":
        self.rows = list(rows)
        return self

    def _cell(self, text: str, width: int, align: str) -> str:
        if align == "center":
            text = text.center(width)
        elif align == "right":
            text = text.rjust(width)
        else:
            text = text.ljust(width)
        pad = " " * self.padding
        return f"{pad}{text}{pad}"

    def render(self) -> str:
        cells = [[col.format(row) for col in self.columns] for row in self.rows]
        widths = [
            max([len(col.header)] + [len(r[i]) for r in cells])
            for i, col in enumerate(self.columns)
        ]

        def line(values: list[str], aligns: list[str]) -> str:
            return "│".join(self._cell(v, w, a) for v, w, a in zip(values, widths, aligns)).rstrip()

        header = line([c.header for c in self.columns], ["center"] * len(self.columns))
        rule = "┼".join("─" * (w + 2 * self.padding) for w in widths)
        body = [line(r, [c.align for c in self.columns]) for r in cells]
        return "\n".join([header, rule, *body])


def task_table(tasks: list[Task], show_score: bool = True, as_of: date | None = None) -> Table[Task]:
    """Build the listing table for ranked tasks."""
    table: Table[Task] = Table()
    table.add_column("ID", lambda t: str(t.id), "center")
    table.add_column("P/T/V", lambda t: f"{_num(t.priority)}/{format_time(t.time_required)}/{_num(t.value)}", "center")
    if show_score:
        table.add_column("Score", lambda t: f"{t.score or 0:.2f}", "center")
    table.add_column("Project", lambda t: t.project.name if t.project else "-")
    table.add_column("Deadline", lambda t: format_deadline(t.deadline, as_of), "center")
    table.add_column("Deps", lambda t: format_dependencies(t.dependencies), "center")
    table.add_column("Task", lambda t: t.text)
    return table.set_data(tasks)
