"""List ordering policy - pure, no I/O."""

from dataclasses import replace
from datetime import datetime, timezone

from .scoring import DEFAULT_SCORING, ScoringConfig, compute_score
from .tasks import Task


def _score(t: Task) -> float:
    return t.score or 0


def order_tasks(tasks: list[Task], sort_by_score: bool = True) -> list[Task]:
    """
    Order scored tasks for display.

    Independent tasks always come before blocked ones, whatever the scores.
    Independent tasks are sorted by score (descending) only when
    sort_by_score is set, otherwise they keep their input order. Blocked
    tasks are always sorted by dependency count, then score, both
    descending.

    Pure function - no I/O.
    """
    independent = [t for t in tasks if not t.is_blocked]
    blocked = [t for t in tasks if t.is_blocked]

    if sort_by_score:
        independent = sorted(independent, key=lambda t: -_score(t))

    blocked = sorted(blocked, key=lambda t: (-len(t.dependencies), -_score(t)))

    return independent + blocked


def rank_tasks(
    tasks: list[Task],
    now: datetime | None = None,
    sort_by_score: bool = True,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[Task]:
    """
    Score and order open tasks against a single "now".

    Completed tasks are dropped. Returned tasks are copies carrying a score
    clamped at 0; the inputs are left untouched.
    """
    now = now or datetime.now(timezone.utc)
    scored = [
        replace(t, score=max(compute_score(t, now, config), 0))
        for t in tasks
        if not t.completed
    ]
    return order_tasks(scored, sort_by_score)
