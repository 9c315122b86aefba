from .database import create_session_factory, init_db
from .models import Base, CaseProgressRecord, EvidenceRecord, GeneratedDocumentRecord
from .stores import DocumentStore, EvidenceStore, ProgressStore

__all__ = [
    "Base",
    "CaseProgressRecord",
    "DocumentStore",
    "EvidenceRecord",
    "EvidenceStore",
    "GeneratedDocumentRecord",
    "ProgressStore",
    "create_session_factory",
    "init_db",
]
