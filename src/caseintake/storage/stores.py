from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from caseintake.clock import as_utc
from caseintake.storage.models import CaseProgressRecord, EvidenceRecord, GeneratedDocumentRecord
from caseintake.types import (
    CaseProgress,
    DocumentStatus,
    DocumentType,
    Evidence,
    EvidenceCategory,
    EvidenceType,
    GeneratedDocument,
)

logger = logging.getLogger(__name__)


class DocumentStore:
    """Persists generated documents; ``load`` returns exactly what ``save`` was given."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def save(self, document: GeneratedDocument) -> None:
        with self.session_factory() as session:
            session.merge(
                GeneratedDocumentRecord(
                    id=document.id,
                    title=document.title,
                    document_type=DocumentType(document.document_type).value,
                    template_ref=document.template_ref,
                    content=document.content,
                    status=DocumentStatus(document.status).value,
                    created_at=as_utc(document.created_at),
                    updated_at=as_utc(document.updated_at),
                    generated_data=_to_json_safe(dict(document.generated_data)),
                )
            )
            session.commit()
        logger.debug("Saved document", extra={"document_id": document.id, "status": document.status.value})

    def load(self, document_id: str) -> GeneratedDocument | None:
        with self.session_factory() as session:
            record = session.get(GeneratedDocumentRecord, document_id)
            return _document_from_record(record) if record is not None else None

    def list(self) -> list[GeneratedDocument]:
        with self.session_factory() as session:
            records = session.scalars(
                select(GeneratedDocumentRecord).order_by(GeneratedDocumentRecord.created_at)
            )
            return [_document_from_record(record) for record in records]


class EvidenceStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def save(self, evidence: Evidence) -> None:
        with self.session_factory() as session:
            session.merge(
                EvidenceRecord(
                    id=evidence.id,
                    title=evidence.title,
                    description=evidence.description,
                    type=EvidenceType(evidence.type).value,
                    category=EvidenceCategory(evidence.category).value,
                    uploaded_at=as_utc(evidence.uploaded_at),
                    tags=list(evidence.tags),
                    relevance_score=evidence.relevance_score,
                    notes=evidence.notes,
                    file_ref=evidence.file_ref,
                )
            )
            session.commit()

    def load(self, evidence_id: str) -> Evidence | None:
        with self.session_factory() as session:
            record = session.get(EvidenceRecord, evidence_id)
            if record is None:
                return None
            return Evidence(
                id=record.id,
                title=record.title,
                description=record.description,
                type=EvidenceType(record.type),
                category=EvidenceCategory(record.category),
                uploaded_at=as_utc(record.uploaded_at),
                tags=list(record.tags or []),
                relevance_score=record.relevance_score,
                notes=record.notes,
                file_ref=record.file_ref,
            )


class ProgressStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def save(self, progress: CaseProgress) -> None:
        with self.session_factory() as session:
            session.merge(
                CaseProgressRecord(
                    case_id=progress.case_id,
                    completed_tasks=progress.completed_tasks,
                    total_tasks=progress.total_tasks,
                    current_phase=progress.current_phase.value,
                    next_milestone=progress.next_milestone,
                    estimated_completion=as_utc(progress.estimated_completion),
                )
            )
            session.commit()

    def load(self, case_id: str) -> CaseProgress | None:
        with self.session_factory() as session:
            record = session.get(CaseProgressRecord, case_id)
            if record is None:
                return None
            # Re-validates the phase, so a bad stored value raises InvalidPhase here.
            return CaseProgress(
                case_id=record.case_id,
                completed_tasks=record.completed_tasks,
                total_tasks=record.total_tasks,
                current_phase=record.current_phase,
                next_milestone=record.next_milestone,
                estimated_completion=as_utc(record.estimated_completion),
            )


def _document_from_record(record: GeneratedDocumentRecord) -> GeneratedDocument:
    return GeneratedDocument(
        id=record.id,
        title=record.title,
        document_type=DocumentType(record.document_type),
        template_ref=record.template_ref,
        content=record.content,
        status=DocumentStatus(record.status),
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
        generated_data=dict(record.generated_data or {}),
    )


def _to_json_safe(value: Any) -> Any:
    """Recursively coerce form values into JSON-safe primitives."""

    if isinstance(value, dict):
        return {str(key): _to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_safe(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
