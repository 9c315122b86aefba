from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from caseintake.clock import Clock, SystemClock
from caseintake.config import settings
from caseintake.errors import InvalidUploadState, UploadFailed
from caseintake.types import Evidence, EvidenceCategory, EvidenceType, FileInfo

logger = logging.getLogger(__name__)

_MIME_PREFIXES: tuple[tuple[str, EvidenceType], ...] = (
    ("image/", EvidenceType.PHOTO),
    ("video/", EvidenceType.VIDEO),
    ("audio/", EvidenceType.AUDIO),
)

UPLOAD_STEP = 10


class UploadState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass(slots=True)
class EvidenceDraft:
    """Evidence as submitted by the upload form, before an id and timestamp are assigned."""

    title: str
    description: str
    type: EvidenceType
    category: EvidenceCategory
    file: FileInfo
    tags: list[str] = field(default_factory=list)
    notes: str | None = None


def detect_evidence_type(mime_type: str) -> EvidenceType:
    for prefix, evidence_type in _MIME_PREFIXES:
        if mime_type.startswith(prefix):
            return evidence_type
    return EvidenceType.DOCUMENT


def parse_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def default_title(file_name: str) -> str:
    return file_name.split(".")[0]


class UploadSession:
    """
    One evidence upload at a time.

    Idle -> Uploading -> Uploaded -> Submitted. Cancelling from Uploading,
    Uploaded or Failed discards the session back to Idle. Failed is reachable
    only while uploading.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = UploadState.IDLE
        self.progress = 0
        self.file: FileInfo | None = None
        self.error: str | None = None
        self.title = ""
        self.description = ""
        self.type: EvidenceType | None = None
        self.category: EvidenceCategory | None = None
        self.tags = ""
        self.notes = ""

    def _require(self, *states: UploadState) -> None:
        if self.state not in states:
            allowed = ", ".join(state.value for state in states)
            raise InvalidUploadState(f"Upload is {self.state.value}; expected one of: {allowed}")

    def start(self, file_info: FileInfo) -> None:
        self._require(UploadState.IDLE)
        self.state = UploadState.UPLOADING
        self.file = file_info
        self.progress = 0
        logger.debug("Upload started", extra={"file_name": file_info.name, "size_bytes": file_info.size_bytes})

    def advance(self, progress: int) -> None:
        self._require(UploadState.UPLOADING)
        if not 0 <= progress <= 100:
            raise ValueError(f"Upload progress must be within 0-100, got {progress}")
        if progress < self.progress:
            raise ValueError(f"Upload progress cannot go backwards ({self.progress} -> {progress})")
        self.progress = progress
        if progress == 100:
            self._complete()

    def _complete(self) -> None:
        if self.file is None:
            raise InvalidUploadState("Upload has no file to complete")
        self.state = UploadState.UPLOADED
        self.type = detect_evidence_type(self.file.mime_type)
        self.title = self.title or default_title(self.file.name)
        logger.info("Upload complete", extra={"file_name": self.file.name, "evidence_type": self.type.value})

    def fail(self, reason: str) -> None:
        self._require(UploadState.UPLOADING)
        self.state = UploadState.FAILED
        self.error = reason
        logger.warning("Upload failed", extra={"reason": reason})

    def update_details(self, **details: object) -> None:
        self._require(UploadState.UPLOADED)
        for key, value in details.items():
            if key not in {"title", "description", "type", "category", "tags", "notes"}:
                raise AttributeError(key)
            if key == "type" and value is not None:
                value = EvidenceType(value)
            if key == "category" and value is not None:
                value = EvidenceCategory(value)
            setattr(self, key, value)

    @property
    def can_submit(self) -> bool:
        return (
            self.state is UploadState.UPLOADED
            and bool(self.title)
            and bool(self.description)
            and self.type is not None
            and self.category is not None
        )

    def submit(self) -> EvidenceDraft:
        self._require(UploadState.UPLOADED)
        if not self.can_submit or self.file is None or self.type is None or self.category is None:
            raise InvalidUploadState("Title, description, type and category are required before submitting")
        draft = EvidenceDraft(
            title=self.title,
            description=self.description,
            type=self.type,
            category=self.category,
            file=self.file,
            tags=parse_tags(self.tags),
            notes=self.notes or None,
        )
        self.state = UploadState.SUBMITTED
        return draft

    def cancel(self) -> None:
        """Discard in-flight state and return to Idle."""

        self._require(UploadState.UPLOADING, UploadState.UPLOADED, UploadState.FAILED)
        self._reset()

    def reset(self) -> None:
        """Clear a finished session so the next file can be uploaded."""

        self._reset()


def to_evidence(draft: EvidenceDraft, clock: Clock | None = None) -> Evidence:
    """Assign an id and upload timestamp to a submitted draft."""

    return Evidence(
        id=f"evidence-{uuid.uuid4().hex[:12]}",
        title=draft.title,
        description=draft.description,
        type=draft.type,
        category=draft.category,
        uploaded_at=(clock or SystemClock()).now(),
        tags=list(draft.tags),
        notes=draft.notes,
        file_ref=draft.file.name,
    )


Transport = Callable[[FileInfo, int], None]


def simulate_upload(
    session: UploadSession,
    file_info: FileInfo,
    *,
    transport: Transport | None = None,
    sleep: Callable[[float], None] = time.sleep,
    step_delay: float | None = None,
) -> UploadSession:
    """
    Drive ``session`` from Idle to Uploaded in fixed progress steps.

    ``transport`` is called with each progress value before it is applied and may
    raise ``OSError`` to signal an I/O failure, which marks the session failed and
    surfaces as ``UploadFailed``.
    """

    delay = settings.upload_step_delay_seconds if step_delay is None else step_delay
    session.start(file_info)
    for progress in range(0, 101, UPLOAD_STEP):
        if delay > 0:
            sleep(delay)
        if transport is not None:
            try:
                transport(file_info, progress)
            except OSError as exc:
                session.fail(str(exc))
                raise UploadFailed(f"Upload of {file_info.name} failed: {exc}") from exc
        session.advance(progress)
    return session
