from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class RowTimestampMixin:
    """Bookkeeping for when a row was written; independent of the entity's own timestamps."""

    stored_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )
    modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False
    )


class GeneratedDocumentRecord(RowTimestampMixin, Base):
    """A document produced from a template, with the form values it was generated from."""

    __tablename__ = "generated_documents"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    document_type: Mapped[str] = mapped_column(String, nullable=False)
    template_ref: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String, nullable=False)  # draft|review|final|filed
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    generated_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)


class EvidenceRecord(RowTimestampMixin, Base):
    __tablename__ = "evidence"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    relevance_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_ref: Mapped[str | None] = mapped_column(String, nullable=True)


class CaseProgressRecord(RowTimestampMixin, Base):
    """One progress row per case; created at intake and updated as tasks complete."""

    __tablename__ = "case_progress"

    case_id: Mapped[str] = mapped_column(String, primary_key=True)
    completed_tasks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tasks: Mapped[int] = mapped_column(Integer, nullable=False)
    current_phase: Mapped[str] = mapped_column(String, nullable=False)
    next_milestone: Mapped[str] = mapped_column(String, nullable=False, default="")
    estimated_completion: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
