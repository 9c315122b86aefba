from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from caseintake.config import settings
from caseintake.types import DocumentCategory, DocumentTemplate, Evidence, EvidenceType

ALL = "all"


@dataclass(slots=True)
class EvidenceStats:
    total: int
    photos: int
    documents: int
    videos: int
    high_relevance: int


@dataclass(slots=True)
class TemplateStats:
    total: int
    filings: int
    correspondence: int
    requests: int
    generated: int


def _matches_query(query: str, fields: Iterable[str]) -> bool:
    needle = query.lower()
    return any(needle in value.lower() for value in fields)


def _matches_filter(value: Enum | str, wanted: Enum | str) -> bool:
    if wanted == ALL:
        return True
    return _enum_value(value) == _enum_value(wanted)


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


def evidence_matches(item: Evidence, query: str) -> bool:
    return _matches_query(query, (item.title, item.description, *item.tags))


def template_matches(item: DocumentTemplate, query: str) -> bool:
    return _matches_query(query, (item.name, item.description))


def filter_evidence(
    items: Iterable[Evidence],
    query: str = "",
    type_filter: EvidenceType | str = ALL,
    category_filter: str = ALL,
) -> list[Evidence]:
    """Evidence whose title, description or any tag contains ``query``, in input order."""

    return [
        item
        for item in items
        if evidence_matches(item, query)
        and _matches_filter(item.type, type_filter)
        and _matches_filter(item.category, category_filter)
    ]


def filter_templates(
    items: Iterable[DocumentTemplate],
    query: str = "",
    category_filter: DocumentCategory | str = ALL,
) -> list[DocumentTemplate]:
    return [
        item
        for item in items
        if template_matches(item, query) and _matches_filter(item.category, category_filter)
    ]


def evidence_stats(items: Sequence[Evidence], high_relevance_threshold: int | None = None) -> EvidenceStats:
    threshold = settings.high_relevance_threshold if high_relevance_threshold is None else high_relevance_threshold
    return EvidenceStats(
        total=len(items),
        photos=sum(1 for item in items if item.type is EvidenceType.PHOTO),
        documents=sum(1 for item in items if item.type is EvidenceType.DOCUMENT),
        videos=sum(1 for item in items if item.type is EvidenceType.VIDEO),
        high_relevance=sum(1 for item in items if (item.relevance_score or 0) >= threshold),
    )


def template_stats(templates: Sequence[DocumentTemplate], generated_count: int = 0) -> TemplateStats:
    def _count(category: DocumentCategory) -> int:
        return sum(1 for template in templates if template.category is category)

    return TemplateStats(
        total=len(templates),
        filings=_count(DocumentCategory.FILING_DOCUMENTS),
        correspondence=_count(DocumentCategory.CORRESPONDENCE),
        requests=_count(DocumentCategory.EVIDENCE_REQUESTS),
        generated=generated_count,
    )
