from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from caseintake.clock import parse_datetime
from caseintake.repository.memory import InMemoryRepository
from caseintake.timeline import CaseTimeline
from caseintake.types import (
    ActionCategory,
    ActionPriority,
    AnalysisResult,
    CaseAssessment,
    CaseProgress,
    CaseType,
    DocumentCategory,
    DocumentStatus,
    DocumentTemplate,
    DocumentType,
    EventType,
    Evidence,
    EvidenceCategory,
    EvidenceType,
    FieldType,
    FieldValidation,
    FormField,
    GeneratedDocument,
    Importance,
    LegalStrength,
    LegalViolation,
    RecommendedAction,
    TimelineEvent,
    Urgency,
    ViolationSeverity,
)

logger = logging.getLogger(__name__)


def _required_datetime(payload: Mapping[str, Any], key: str):
    value = parse_datetime(payload.get(key))
    if value is None:
        raise ValueError(f"Missing required timestamp {key!r} in {payload.get('id', '<unknown>')}")
    return value


def _analysis_from_payload(payload: Mapping[str, Any]) -> AnalysisResult:
    return AnalysisResult(
        overall_score=int(payload["overall_score"]),
        legal_strength=LegalStrength(payload["legal_strength"]),
        key_findings=list(payload.get("key_findings", [])),
        recommended_actions=[
            RecommendedAction(
                id=str(action["id"]),
                title=action["title"],
                description=action["description"],
                priority=ActionPriority(action["priority"]),
                category=ActionCategory(action["category"]),
                estimated_duration=action["estimated_duration"],
                due_date=parse_datetime(action.get("due_date")),
            )
            for action in payload.get("recommended_actions", [])
        ],
        potential_violations=[
            LegalViolation(
                type=violation["type"],
                description=violation["description"],
                statute=violation["statute"],
                severity=ViolationSeverity(violation["severity"]),
                evidence=list(violation.get("evidence", [])),
            )
            for violation in payload.get("potential_violations", [])
        ],
        evidence_gaps=list(payload.get("evidence_gaps", [])),
        estimated_timeframe=payload["estimated_timeframe"],
        confidence_level=int(payload["confidence_level"]),
    )


def _field_from_payload(payload: Mapping[str, Any]) -> FormField:
    validation = payload.get("validation")
    return FormField(
        id=payload["id"],
        label=payload["label"],
        type=FieldType(payload["type"]),
        required=bool(payload.get("required", False)),
        placeholder=payload.get("placeholder"),
        options=tuple(payload["options"]) if payload.get("options") else None,
        validation=FieldValidation(**validation) if validation else None,
    )


def _template_from_payload(payload: Mapping[str, Any]) -> DocumentTemplate:
    return DocumentTemplate(
        id=payload["id"],
        name=payload["name"],
        description=payload["description"],
        category=DocumentCategory(payload["category"]),
        fields=tuple(_field_from_payload(item) for item in payload.get("fields", [])),
        body_template=payload.get("body_template", ""),
        document_type=DocumentType(payload.get("document_type", DocumentType.OTHER.value)),
    )


def _evidence_from_payload(payload: Mapping[str, Any]) -> Evidence:
    return Evidence(
        id=payload["id"],
        title=payload["title"],
        description=payload["description"],
        type=EvidenceType(payload["type"]),
        category=EvidenceCategory(payload["category"]),
        uploaded_at=_required_datetime(payload, "uploaded_at"),
        tags=list(payload.get("tags", [])),
        relevance_score=payload.get("relevance_score"),
        notes=payload.get("notes"),
        file_ref=payload.get("file_ref"),
    )


def _document_from_payload(payload: Mapping[str, Any]) -> GeneratedDocument:
    return GeneratedDocument(
        id=payload["id"],
        title=payload["title"],
        document_type=DocumentType(payload["document_type"]),
        template_ref=payload["template_ref"],
        content=payload.get("content", ""),
        status=DocumentStatus(payload["status"]),
        created_at=_required_datetime(payload, "created_at"),
        updated_at=_required_datetime(payload, "updated_at"),
        generated_data=dict(payload.get("generated_data", {})),
    )


def _timeline_from_payload(payload: Mapping[str, Any]) -> CaseTimeline:
    events = [
        TimelineEvent(
            id=event["id"],
            date=_required_datetime(event, "date"),
            title=event["title"],
            description=event.get("description", ""),
            type=EventType(event["type"]),
            importance=Importance(event["importance"]),
            documents=list(event.get("documents", [])),
        )
        for event in payload.get("events", [])
    ]
    return CaseTimeline(payload["id"], payload["case_id"], events)


def _progress_from_payload(payload: Mapping[str, Any]) -> CaseProgress:
    return CaseProgress(
        case_id=payload["case_id"],
        completed_tasks=int(payload["completed_tasks"]),
        total_tasks=int(payload["total_tasks"]),
        current_phase=payload["current_phase"],
        next_milestone=payload.get("next_milestone", ""),
        estimated_completion=_required_datetime(payload, "estimated_completion"),
    )


@dataclass
class FixtureDataset:
    """Repositories populated from a static JSON fixture."""

    default_analysis: AnalysisResult | None = None
    assessments: InMemoryRepository[CaseAssessment] = field(default_factory=InMemoryRepository)
    evidence: InMemoryRepository[Evidence] = field(default_factory=InMemoryRepository)
    templates: InMemoryRepository[DocumentTemplate] = field(default_factory=InMemoryRepository)
    documents: InMemoryRepository[GeneratedDocument] = field(default_factory=InMemoryRepository)
    timelines: InMemoryRepository[CaseTimeline] = field(default_factory=InMemoryRepository)
    progress: dict[str, CaseProgress] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> FixtureDataset:
        default_analysis = (
            _analysis_from_payload(payload["analysis"]) if payload.get("analysis") else None
        )
        dataset = cls(default_analysis=default_analysis)

        for item in payload.get("assessments", []):
            analysis = item.get("analysis")
            dataset.assessments.add(
                CaseAssessment(
                    id=item["id"],
                    title=item["title"],
                    description=item["description"],
                    case_type=CaseType(item["case_type"]),
                    urgency=Urgency(item["urgency"]),
                    created_at=_required_datetime(item, "created_at"),
                    updated_at=_required_datetime(item, "updated_at"),
                    analysis=_analysis_from_payload(analysis) if analysis else default_analysis,
                )
            )
        for item in payload.get("evidence", []):
            dataset.evidence.add(_evidence_from_payload(item))
        for item in payload.get("templates", []):
            dataset.templates.add(_template_from_payload(item))
        for item in payload.get("documents", []):
            dataset.documents.add(_document_from_payload(item))
        for item in payload.get("timelines", []):
            dataset.timelines.add(_timeline_from_payload(item))
        for item in payload.get("progress", []):
            progress = _progress_from_payload(item)
            dataset.progress[progress.case_id] = progress
        return dataset

    @classmethod
    def load(cls, fixture_path: Path) -> FixtureDataset:
        with fixture_path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        dataset = cls.from_payload(payload)
        logger.debug(
            "Loaded fixture dataset",
            extra={
                "fixture_path": str(fixture_path),
                "evidence": len(dataset.evidence),
                "templates": len(dataset.templates),
            },
        )
        return dataset

    def timeline_for_case(self, case_id: str) -> CaseTimeline | None:
        for timeline in self.timelines.filter(lambda item: item.case_id == case_id):
            return timeline
        return None

    def progress_for_case(self, case_id: str) -> CaseProgress | None:
        return self.progress.get(case_id)

    def analyses_by_case_type(self) -> dict[CaseType, AnalysisResult]:
        result: dict[CaseType, AnalysisResult] = {}
        for assessment in self.assessments.list():
            if assessment.analysis is not None:
                result.setdefault(assessment.case_type, assessment.analysis)
        return result


def load_dataset(fixture_path: Path) -> FixtureDataset:
    return FixtureDataset.load(fixture_path)
