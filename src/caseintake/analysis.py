from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Mapping

from caseintake.clock import Clock, SystemClock
from caseintake.types import AnalysisResult, CaseAssessment, CaseType, Urgency

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntakeForm:
    """Free-form incident description as entered on the assessment page."""

    title: str = ""
    description: str = ""
    case_type: str = ""
    urgency: str = Urgency.MEDIUM.value
    incident_date: str = ""
    location: str = ""
    parties: str = ""
    damages: str = ""


def missing_intake_fields(form: IntakeForm) -> list[str]:
    return [name for name in ("title", "description", "case_type") if not getattr(form, name)]


def can_analyze(form: IntakeForm) -> bool:
    return not missing_intake_fields(form)


class CannedAnalyzer:
    """
    Returns pre-written case-strength analyses.

    Results are looked up by case type and fall back to ``default``. No scoring
    happens here; the numbers come from the fixture dataset.
    """

    def __init__(
        self,
        default: AnalysisResult,
        by_case_type: Mapping[CaseType, AnalysisResult] | None = None,
        *,
        clock: Clock | None = None,
        delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.default = default
        self.by_case_type = dict(by_case_type or {})
        self.clock = clock or SystemClock()
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def analyze(self, form: IntakeForm) -> CaseAssessment:
        missing = missing_intake_fields(form)
        if missing:
            raise ValueError(f"Missing required intake fields: {', '.join(missing)}")

        case_type = CaseType(form.case_type)
        urgency = Urgency(form.urgency or Urgency.MEDIUM.value)
        logger.info("Starting analysis", extra={"case_type": case_type.value})
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

        now = self.clock.now()
        assessment = CaseAssessment(
            id=f"case-{uuid.uuid4().hex[:12]}",
            title=form.title,
            description=form.description,
            case_type=case_type,
            urgency=urgency,
            created_at=now,
            updated_at=now,
            analysis=self.by_case_type.get(case_type, self.default),
        )
        logger.info("Analysis completed", extra={"case_id": assessment.id})
        return assessment


def summarize_analysis(result: AnalysisResult, max_findings: int = 4) -> str:
    header = (
        f"Case strength {result.overall_score}/100 ({result.legal_strength.value.replace('-', ' ')}, "
        f"confidence {result.confidence_level}%)"
    )
    lines = [header, f"Estimated timeframe: {result.estimated_timeframe}"]
    lines.extend(f"- {finding}" for finding in result.key_findings[:max_findings])
    if result.recommended_actions:
        lines.append("Recommended actions:")
        lines.extend(
            f"- [{action.priority.value}] {action.title} ({action.estimated_duration})"
            for action in result.recommended_actions
        )
    if result.evidence_gaps:
        lines.append("Evidence gaps:")
        lines.extend(f"- {gap}" for gap in result.evidence_gaps)
    return "\n".join(lines)
