from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from caseintake.errors import InvalidPhase


class CasePhase(str, Enum):
    INTAKE = "intake"
    INVESTIGATION = "investigation"
    EVIDENCE_COLLECTION = "evidence-collection"
    LEGAL_RESEARCH = "legal-research"
    FILING_PREPARATION = "filing-preparation"
    ACTIVE_LITIGATION = "active-litigation"
    SETTLEMENT_NEGOTIATION = "settlement-negotiation"
    RESOLUTION = "resolution"


# Enum definition order is the lifecycle order.
PHASE_ORDER: tuple[CasePhase, ...] = tuple(CasePhase)


class CaseType(str, Enum):
    EMPLOYMENT_DISCRIMINATION = "employment-discrimination"
    HOUSING_DISCRIMINATION = "housing-discrimination"
    POLICE_MISCONDUCT = "police-misconduct"
    VOTING_RIGHTS = "voting-rights"
    EDUCATION_DISCRIMINATION = "education-discrimination"
    DISABILITY_RIGHTS = "disability-rights"
    LGBTQ_RIGHTS = "lgbtq-rights"
    RELIGIOUS_DISCRIMINATION = "religious-discrimination"
    OTHER = "other"


class EvidenceType(str, Enum):
    DOCUMENT = "document"
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    EMAIL = "email"
    TEXT_MESSAGE = "text-message"
    WITNESS_STATEMENT = "witness-statement"
    OFFICIAL_RECORD = "official-record"


class EvidenceCategory(str, Enum):
    INCIDENT_DOCUMENTATION = "incident-documentation"
    COMMUNICATION_RECORDS = "communication-records"
    WITNESS_TESTIMONY = "witness-testimony"
    EXPERT_ANALYSIS = "expert-analysis"
    OFFICIAL_DOCUMENTS = "official-documents"
    MEDICAL_RECORDS = "medical-records"
    FINANCIAL_RECORDS = "financial-records"
    OTHER = "other"


class DocumentType(str, Enum):
    COMPLAINT = "complaint"
    MOTION = "motion"
    BRIEF = "brief"
    AFFIDAVIT = "affidavit"
    DEMAND_LETTER = "demand-letter"
    FOIA_REQUEST = "foia-request"
    SETTLEMENT_AGREEMENT = "settlement-agreement"
    OTHER = "other"


class DocumentCategory(str, Enum):
    FILING_DOCUMENTS = "filing-documents"
    CORRESPONDENCE = "correspondence"
    EVIDENCE_REQUESTS = "evidence-requests"
    SETTLEMENT_DOCUMENTS = "settlement-documents"
    PROCEDURAL_DOCUMENTS = "procedural-documents"


class DocumentStatus(str, Enum):
    """Generated document lifecycle; only forward moves are allowed."""

    DRAFT = "draft"
    REVIEW = "review"
    FINAL = "final"
    FILED = "filed"


STATUS_ORDER: tuple[DocumentStatus, ...] = tuple(DocumentStatus)


class EventType(str, Enum):
    INCIDENT = "incident"
    FILING = "filing"
    RESPONSE = "response"
    DEADLINE = "deadline"
    MEETING = "meeting"


class Importance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"
    NUMBER = "number"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LegalStrength(str, Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    VERY_STRONG = "very-strong"


class ActionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ActionCategory(str, Enum):
    LEGAL = "legal"
    EVIDENCE = "evidence"
    DOCUMENTATION = "documentation"
    FILING = "filing"


class ViolationSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    SEVERE = "severe"


@dataclass(slots=True)
class CaseProgress:
    case_id: str
    completed_tasks: int
    total_tasks: int
    current_phase: CasePhase
    next_milestone: str
    estimated_completion: datetime

    def __post_init__(self) -> None:
        try:
            self.current_phase = CasePhase(self.current_phase)
        except ValueError as exc:
            raise InvalidPhase(self.current_phase) from exc
        if self.total_tasks < 0 or self.completed_tasks < 0:
            raise ValueError("Task counts must be non-negative")
        if self.completed_tasks > self.total_tasks:
            raise ValueError(
                f"completed_tasks ({self.completed_tasks}) exceeds total_tasks ({self.total_tasks})"
            )


@dataclass(slots=True)
class TimelineEvent:
    id: str
    date: datetime
    title: str
    description: str
    type: EventType
    importance: Importance
    # Weak references to GeneratedDocument ids.
    documents: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Evidence:
    id: str
    title: str
    description: str
    type: EvidenceType
    category: EvidenceCategory
    uploaded_at: datetime
    tags: list[str] = field(default_factory=list)
    relevance_score: int | None = None
    notes: str | None = None
    file_ref: str | None = None

    def __post_init__(self) -> None:
        if self.relevance_score is not None and not 0 <= self.relevance_score <= 100:
            raise ValueError(f"relevance_score must be within 0-100, got {self.relevance_score}")


@dataclass(frozen=True, slots=True)
class FieldValidation:
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    custom_message: str | None = None


@dataclass(frozen=True, slots=True)
class FormField:
    id: str
    label: str
    type: FieldType
    required: bool = False
    placeholder: str | None = None
    options: tuple[str, ...] | None = None
    validation: FieldValidation | None = None


@dataclass(frozen=True, slots=True)
class DocumentTemplate:
    id: str
    name: str
    description: str
    category: DocumentCategory
    fields: tuple[FormField, ...]
    body_template: str
    document_type: DocumentType = DocumentType.OTHER


@dataclass(slots=True)
class GeneratedDocument:
    id: str
    title: str
    document_type: DocumentType
    template_ref: str
    content: str
    status: DocumentStatus
    created_at: datetime
    updated_at: datetime
    generated_data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class FileInfo:
    """What the upload collaborator reports about a raw file."""

    name: str
    size_bytes: int
    mime_type: str


@dataclass(slots=True)
class RecommendedAction:
    id: str
    title: str
    description: str
    priority: ActionPriority
    category: ActionCategory
    estimated_duration: str
    due_date: datetime | None = None


@dataclass(slots=True)
class LegalViolation:
    type: str
    description: str
    statute: str
    severity: ViolationSeverity
    evidence: list[str] = field(default_factory=list)


@dataclass(slots=True)
class AnalysisResult:
    overall_score: int
    legal_strength: LegalStrength
    key_findings: list[str]
    recommended_actions: list[RecommendedAction]
    potential_violations: list[LegalViolation]
    evidence_gaps: list[str]
    estimated_timeframe: str
    confidence_level: int


@dataclass(slots=True)
class CaseAssessment:
    id: str
    title: str
    description: str
    case_type: CaseType
    urgency: Urgency
    created_at: datetime
    updated_at: datetime
    analysis: AnalysisResult | None = None
