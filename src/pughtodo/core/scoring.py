"""
Pugh score calculation - pure, no I/O.

A task's score is a weighted sum of five normalized criteria:

    priority/10 * 0.3 + value/10 * 0.2 - effort * 0.2
        + deadline_pressure * 0.15 + age_urgency * 0.15

multiplied by the weight of the task's project. Effort counts against a
task. "now" is always passed in, never read here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .tasks import Task

SECONDS_PER_DAY = 60 * 60 * 24


@dataclass(frozen=True)
class ScoringWeights:
    """Calibrated criterion weights. Not user settings."""

    priority: float = 0.3
    value: float = 0.2
    time_required: float = 0.2
    deadline: float = 0.15
    urgency: float = 0.15


@dataclass(frozen=True)
class ScoringConfig:
    """All constants the score formula depends on."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    # Hours per day realistically available for task work
    hours_per_day: float = 2.0
    time_buffer_factor: float = 1.5
    urgency_baseline_days: float = 14
    urgency_exponent: float = 1.5
    deadline_crunch_days: float = 7
    deadline_horizon_days: float = 30
    deadline_decay_divisor: float = 46
    deadline_far_factor: float = 0.1
    completed_score: float = -1


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class NormalizedComponents:
    priority: float
    value: float
    time: float


def _days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative if end is earlier)."""
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    return (end - start).total_seconds() / SECONDS_PER_DAY


def normalized_components(task: Task, config: ScoringConfig = DEFAULT_SCORING) -> NormalizedComponents:
    """Scale priority and value to [0, 1]; effort caps at one work day."""
    return NormalizedComponents(
        priority=task.priority / 10,
        value=task.value / 10,
        time=min(task.time_required / config.hours_per_day, 1),
    )


def effective_days(
    days_until_deadline: float,
    hours_required: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Days left once a buffered effort estimate is subtracted."""
    buffer_hours = hours_required * config.time_buffer_factor
    return days_until_deadline - buffer_hours / config.hours_per_day


def deadline_factor(task: Task, now: datetime, config: ScoringConfig = DEFAULT_SCORING) -> float:
    """
    Deadline pressure in [0, 1].

    0 without a deadline, 1 once the buffered deadline has passed, a
    quadratic ramp inside the crunch window, a linear decay out to the
    horizon and a flat floor beyond it.
    """
    if task.deadline is None:
        return 0

    days = effective_days(_days_between(now, task.deadline), task.time_required, config)

    if days <= 0:
        return 1
    if days <= config.deadline_crunch_days:
        return 1 - (days / config.deadline_crunch_days) ** 2
    if days <= config.deadline_horizon_days:
        return 0.5 - (days - config.deadline_crunch_days) / config.deadline_decay_divisor
    return config.deadline_far_factor


def urgency_factor(task: Task, now: datetime, config: ScoringConfig = DEFAULT_SCORING) -> float:
    """Age-based urgency in [0, 1], super-linear up to the baseline age."""
    age_days = _days_between(task.created_at, now)
    if age_days <= 0:
        return 0
    return min((age_days / config.urgency_baseline_days) ** config.urgency_exponent, 1)


def weighted_score(
    normalized: NormalizedComponents,
    deadline: float,
    urgency: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    w = config.weights
    return (
        normalized.priority * w.priority
        + normalized.value * w.value
        - normalized.time * w.time_required
        + deadline * w.deadline
        + urgency * w.urgency
    )


def compute_score(task: Task, now: datetime, config: ScoringConfig = DEFAULT_SCORING) -> float:
    """
    Pugh score for a task as of `now`.

    Completed tasks get `config.completed_score` (-1) so they sort last if
    they ever reach a ranked list. Never raises on out-of-range input.
    """
    if task.completed:
        return config.completed_score

    score = weighted_score(
        normalized_components(task, config),
        deadline_factor(task, now, config),
        urgency_factor(task, now, config),
        config,
    )
    return score * task.project_weight
