import math
from datetime import datetime, timedelta, timezone
from fractions import Fraction

import pytest

from caseintake.errors import InvalidPhase
from caseintake.progress import (
    PhaseState,
    classify_phase,
    completion_percentage,
    current_phase_index,
    days_remaining,
    is_overdue,
    move_to_phase,
    record_completed_tasks,
    summarize_progress,
)
from caseintake.types import PHASE_ORDER, CasePhase, CaseProgress

from conftest import NOW


def _progress(completed=8, total=12, phase=CasePhase.EVIDENCE_COLLECTION, eta=None):
    return CaseProgress(
        case_id="case-1",
        completed_tasks=completed,
        total_tasks=total,
        current_phase=phase,
        next_milestone="Complete evidence gathering",
        estimated_completion=eta or datetime(2024, 2, 29, tzinfo=timezone.utc),
    )


def test_completion_percentage_matches_rounded_ratio():
    for total in range(1, 25):
        for completed in range(total + 1):
            pct = completion_percentage(_progress(completed, total))
            expected = math.floor(Fraction(100 * completed, total) + Fraction(1, 2))
            assert 0 <= pct <= 100
            assert pct == expected


def test_completion_percentage_rounds_half_up():
    assert completion_percentage(_progress(1, 8)) == 13
    assert completion_percentage(_progress(8, 12)) == 67


def test_zero_total_tasks_is_zero_percent():
    assert completion_percentage(_progress(0, 0)) == 0


def test_unknown_phase_is_rejected_at_construction():
    with pytest.raises(InvalidPhase):
        _progress(phase="appeal")


def test_string_phase_is_coerced():
    progress = _progress(phase="legal-research")
    assert progress.current_phase is CasePhase.LEGAL_RESEARCH
    assert current_phase_index(progress) == 3


def test_completed_cannot_exceed_total():
    with pytest.raises(ValueError):
        _progress(13, 12)


def test_days_remaining_uses_ceiling(clock):
    assert days_remaining(_progress(), clock) == 45
    assert days_remaining(_progress(eta=NOW + timedelta(hours=1)), clock) == 1
    assert days_remaining(_progress(eta=NOW - timedelta(hours=36)), clock) == -1


def test_due_now_counts_as_overdue(clock):
    assert is_overdue(_progress(eta=NOW), clock)
    assert not is_overdue(_progress(), clock)


def test_phase_classification_has_exactly_one_current():
    for current in range(len(PHASE_ORDER)):
        states = [classify_phase(idx, current) for idx in range(len(PHASE_ORDER))]
        assert states.count(PhaseState.CURRENT) == 1
        assert all(state is PhaseState.COMPLETED for state in states[:current])
        assert all(state is PhaseState.UPCOMING for state in states[current + 1 :])


def test_summarize_progress(clock):
    summary = summarize_progress(_progress(), clock)

    assert summary.completion_percentage == 67
    assert summary.current_phase_index == 2
    assert summary.phase_position == "Phase 3 of 8"
    assert summary.days_label == "45d"
    assert not summary.is_overdue
    assert [step.label for step in summary.steps][:3] == ["Intake", "Investigation", "Evidence Collection"]
    assert summary.steps[2].state is PhaseState.CURRENT


def test_overdue_summary_label(clock):
    summary = summarize_progress(_progress(eta=NOW - timedelta(days=3)), clock)
    assert summary.is_overdue
    assert summary.days_label == "Overdue"


def test_record_completed_tasks_caps_at_total():
    progress = record_completed_tasks(_progress(11, 12), 5)
    assert progress.completed_tasks == 12


def test_move_to_phase_validates():
    progress = move_to_phase(_progress(), "filing-preparation")
    assert progress.current_phase is CasePhase.FILING_PREPARATION
    with pytest.raises(InvalidPhase):
        move_to_phase(progress, "appeal")
