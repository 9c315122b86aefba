from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from caseintake.clock import Clock, as_utc
from caseintake.display import phase_label
from caseintake.errors import InvalidPhase
from caseintake.types import PHASE_ORDER, CasePhase, CaseProgress

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


class PhaseState(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(slots=True)
class PhaseStep:
    phase: CasePhase
    label: str
    state: PhaseState


@dataclass(slots=True)
class ProgressSummary:
    """Everything the progress dashboard renders for one case."""

    case_id: str
    completion_percentage: int
    completed_tasks: int
    total_tasks: int
    current_phase: CasePhase
    current_phase_index: int
    phase_position: str
    days_remaining: int
    is_overdue: bool
    days_label: str
    next_milestone: str
    steps: list[PhaseStep]


def completion_percentage(progress: CaseProgress) -> int:
    if progress.total_tasks <= 0:
        return 0
    # Round half up: 1 of 8 is 13%.
    return (200 * progress.completed_tasks + progress.total_tasks) // (2 * progress.total_tasks)


def current_phase_index(progress: CaseProgress) -> int:
    try:
        return PHASE_ORDER.index(progress.current_phase)
    except ValueError as exc:
        raise InvalidPhase(progress.current_phase) from exc


def days_remaining(progress: CaseProgress, clock: Clock) -> int:
    delta = as_utc(progress.estimated_completion) - clock.now()
    return math.ceil(delta / _ONE_DAY)


def is_overdue(progress: CaseProgress, clock: Clock) -> bool:
    return days_remaining(progress, clock) <= 0


def classify_phase(index: int, current_index: int) -> PhaseState:
    if index < current_index:
        return PhaseState.COMPLETED
    if index == current_index:
        return PhaseState.CURRENT
    return PhaseState.UPCOMING


def phase_steps(progress: CaseProgress) -> list[PhaseStep]:
    current = current_phase_index(progress)
    return [
        PhaseStep(phase=phase, label=phase_label(phase), state=classify_phase(idx, current))
        for idx, phase in enumerate(PHASE_ORDER)
    ]


def summarize_progress(progress: CaseProgress, clock: Clock) -> ProgressSummary:
    index = current_phase_index(progress)
    remaining = days_remaining(progress, clock)
    overdue = remaining <= 0
    return ProgressSummary(
        case_id=progress.case_id,
        completion_percentage=completion_percentage(progress),
        completed_tasks=progress.completed_tasks,
        total_tasks=progress.total_tasks,
        current_phase=progress.current_phase,
        current_phase_index=index,
        phase_position=f"Phase {index + 1} of {len(PHASE_ORDER)}",
        days_remaining=remaining,
        is_overdue=overdue,
        days_label="Overdue" if overdue else f"{remaining}d",
        next_milestone=progress.next_milestone,
        steps=phase_steps(progress),
    )


def record_completed_tasks(progress: CaseProgress, count: int = 1) -> CaseProgress:
    """Mark ``count`` more tasks done, capped at the task total."""

    if count < 0:
        raise ValueError("count must be non-negative")
    progress.completed_tasks = min(progress.completed_tasks + count, progress.total_tasks)
    logger.debug(
        "Recorded completed tasks",
        extra={"case_id": progress.case_id, "completed": progress.completed_tasks},
    )
    return progress


def move_to_phase(progress: CaseProgress, phase: CasePhase | str) -> CaseProgress:
    try:
        target = CasePhase(phase)
    except ValueError as exc:
        raise InvalidPhase(phase) from exc
    logger.info(
        "Case phase changed",
        extra={"case_id": progress.case_id, "from": progress.current_phase.value, "to": target.value},
    )
    progress.current_phase = target
    return progress
