"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Category, Project
from .scoring import ScoringConfig, ScoringWeights, DEFAULT_SCORING, compute_score
from .ordering import order_tasks, rank_tasks
from .display import format_deadline, format_time, task_table

__all__ = [
    # Records
    "Task",
    "Category",
    "Project",
    # Scoring
    "ScoringConfig",
    "ScoringWeights",
    "DEFAULT_SCORING",
    "compute_score",
    # Ordering
    "order_tasks",
    "rank_tasks",
    # Display
    "format_deadline",
    "format_time",
    "task_table",
]
