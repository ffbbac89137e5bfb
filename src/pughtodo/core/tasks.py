"""Pure task domain records - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def from_millis(ms: int | float | None) -> datetime | None:
    """Convert epoch milliseconds to an aware UTC datetime."""
    if ms is None:
        return None
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def to_millis(dt: datetime | None) -> int | None:
    """Convert a datetime to epoch milliseconds (naive values are taken as UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


@dataclass
class Category:
    """A named bucket for todos."""

    name: str
    weight: float = 1.0


@dataclass
class Project:
    """A group of todos whose weight multiplies their score."""

    id: int
    name: str
    description: str = ""
    category: str = ""
    weight: float = 1.0


@dataclass
class Task:
    """A todo with the attributes the Pugh score is computed from."""

    id: int
    text: str
    category: str
    priority: float
    value: float
    time_required: float
    created_at: datetime
    deadline: datetime | None = None
    completed: bool = False
    project: Project | None = None
    dependencies: list[int] = field(default_factory=list)
    score: float | None = None

    @property
    def project_weight(self) -> float:
        return self.project.weight if self.project else 1.0

    @property
    def is_blocked(self) -> bool:
        """Any recorded dependency blocks, whether or not it is done."""
        return bool(self.dependencies)

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "priority": self.priority,
            "value": self.value,
            "time_required": self.time_required,
            "created_at": self.created_at.isoformat(),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "completed": self.completed,
            "project": self.project.name if self.project else None,
            "project_weight": self.project_weight,
            "dependencies": list(self.dependencies),
            "score": self.score,
        }

    @classmethod
    def from_row(cls, row: dict, project: Project | None = None, dependencies: list[int] | None = None) -> "Task":
        """Create Task from a storage row keyed by column name."""
        return cls(
            id=row["id"],
            text=row["text"],
            category=row["category"],
            priority=row["priority"],
            value=row["value"],
            time_required=row.get("time_required") or 1,
            created_at=from_millis(row["created_at"]),
            deadline=from_millis(row.get("deadline")),
            completed=bool(row.get("completed", 0)),
            project=project,
            dependencies=dependencies or [],
        )

