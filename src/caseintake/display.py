"""Static display attributes keyed by enum variant.

Renderers look values up here instead of branching on enums themselves. Style
values are opaque tokens (utility class strings) passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from caseintake.types import (
    ActionPriority,
    CasePhase,
    DocumentStatus,
    EventType,
    EvidenceType,
    Importance,
    LegalStrength,
    ViolationSeverity,
)


@dataclass(frozen=True, slots=True)
class DisplayAttrs:
    label: str
    style: str
    icon: str | None = None


MUTED = DisplayAttrs(label="", style="text-muted-foreground bg-muted/10 border-border")

PHASES: Mapping[CasePhase, DisplayAttrs] = {
    CasePhase.INTAKE: DisplayAttrs("Intake", "bg-slate-500"),
    CasePhase.INVESTIGATION: DisplayAttrs("Investigation", "bg-blue-500"),
    CasePhase.EVIDENCE_COLLECTION: DisplayAttrs("Evidence Collection", "bg-yellow-500"),
    CasePhase.LEGAL_RESEARCH: DisplayAttrs("Legal Research", "bg-purple-500"),
    CasePhase.FILING_PREPARATION: DisplayAttrs("Filing Preparation", "bg-orange-500"),
    CasePhase.ACTIVE_LITIGATION: DisplayAttrs("Active Litigation", "bg-red-500"),
    CasePhase.SETTLEMENT_NEGOTIATION: DisplayAttrs("Settlement Negotiation", "bg-green-500"),
    CasePhase.RESOLUTION: DisplayAttrs("Resolution", "bg-emerald-600"),
}

EVENT_TYPES: Mapping[EventType, DisplayAttrs] = {
    EventType.INCIDENT: DisplayAttrs("Incident", "", icon="alert-triangle"),
    EventType.FILING: DisplayAttrs("Filing", "", icon="file-text"),
    EventType.RESPONSE: DisplayAttrs("Response", "", icon="message-square"),
    EventType.DEADLINE: DisplayAttrs(
        "Deadline", "text-legal-warning bg-legal-warning/10 border-legal-warning/20", icon="clock"
    ),
    EventType.MEETING: DisplayAttrs("Meeting", "", icon="users"),
}

IMPORTANCE: Mapping[Importance, DisplayAttrs] = {
    Importance.HIGH: DisplayAttrs("high", "text-legal-navy bg-legal-navy/10 border-legal-navy/20"),
    Importance.MEDIUM: DisplayAttrs("medium", "text-legal-blue bg-legal-blue/10 border-legal-blue/20"),
    Importance.LOW: DisplayAttrs("low", MUTED.style),
}

EVIDENCE_TYPES: Mapping[EvidenceType, DisplayAttrs] = {
    EvidenceType.DOCUMENT: DisplayAttrs("document", "bg-gray-100 text-gray-800", icon="file-text"),
    EvidenceType.PHOTO: DisplayAttrs("photo", "bg-green-100 text-green-800", icon="image"),
    EvidenceType.VIDEO: DisplayAttrs("video", "bg-purple-100 text-purple-800", icon="video"),
    EvidenceType.AUDIO: DisplayAttrs("audio", "bg-yellow-100 text-yellow-800", icon="mic"),
    EvidenceType.EMAIL: DisplayAttrs("email", "bg-blue-100 text-blue-800", icon="file-text"),
    EvidenceType.TEXT_MESSAGE: DisplayAttrs("text message", "bg-gray-100 text-gray-800", icon="file-text"),
    EvidenceType.WITNESS_STATEMENT: DisplayAttrs(
        "witness statement", "bg-orange-100 text-orange-800", icon="file-text"
    ),
    EvidenceType.OFFICIAL_RECORD: DisplayAttrs("official record", "bg-gray-100 text-gray-800", icon="file-text"),
}

DOCUMENT_STATUSES: Mapping[DocumentStatus, DisplayAttrs] = {
    DocumentStatus.DRAFT: DisplayAttrs("Draft", "bg-yellow-100 text-yellow-800"),
    DocumentStatus.REVIEW: DisplayAttrs("Review", "bg-blue-100 text-blue-800"),
    DocumentStatus.FINAL: DisplayAttrs("Final", "bg-green-100 text-green-800"),
    DocumentStatus.FILED: DisplayAttrs("Filed", "bg-purple-100 text-purple-800"),
}

LEGAL_STRENGTHS: Mapping[LegalStrength, DisplayAttrs] = {
    LegalStrength.VERY_STRONG: DisplayAttrs("very strong", "text-legal-green border-legal-green bg-legal-green/10"),
    LegalStrength.STRONG: DisplayAttrs("strong", "text-legal-green border-legal-green bg-legal-green/10"),
    LegalStrength.MODERATE: DisplayAttrs("moderate", "text-legal-blue border-legal-blue bg-legal-blue/10"),
    LegalStrength.WEAK: DisplayAttrs("weak", "text-legal-warning border-legal-warning bg-legal-warning/10"),
}

ACTION_PRIORITIES: Mapping[ActionPriority, DisplayAttrs] = {
    ActionPriority.URGENT: DisplayAttrs("urgent", "bg-destructive text-destructive-foreground"),
    ActionPriority.HIGH: DisplayAttrs("high", "bg-legal-warning text-white"),
    ActionPriority.MEDIUM: DisplayAttrs("medium", "bg-legal-blue text-white"),
    ActionPriority.LOW: DisplayAttrs("low", "bg-muted text-muted-foreground"),
}

VIOLATION_SEVERITIES: Mapping[ViolationSeverity, DisplayAttrs] = {
    ViolationSeverity.SEVERE: DisplayAttrs("severe", "text-destructive"),
    ViolationSeverity.MAJOR: DisplayAttrs("major", "text-legal-warning"),
    ViolationSeverity.MODERATE: DisplayAttrs("moderate", "text-legal-blue"),
    ViolationSeverity.MINOR: DisplayAttrs("minor", "text-muted-foreground"),
}

# (minimum score, style), checked top-down.
RELEVANCE_TIERS: tuple[tuple[int, str], ...] = (
    (90, "text-legal-green"),
    (75, "text-legal-blue"),
    (60, "text-legal-warning"),
)


def phase_label(phase: CasePhase) -> str:
    return PHASES[phase].label


def phase_style(phase: CasePhase, is_current: bool = False) -> str:
    return PHASES[phase].style if is_current else "bg-muted"


def event_style(event_type: EventType, importance: Importance) -> str:
    """Deadlines always get the warning style; other events are styled by importance."""

    if event_type is EventType.DEADLINE:
        return EVENT_TYPES[EventType.DEADLINE].style
    return IMPORTANCE.get(importance, MUTED).style


def relevance_style(score: int | None) -> str:
    if not score:
        return "text-muted-foreground"
    for minimum, style in RELEVANCE_TIERS:
        if score >= minimum:
            return style
    return "text-muted-foreground"
