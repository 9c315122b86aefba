from __future__ import annotations

from typing import Iterable


class CaseIntakeError(ValueError):
    """Base class for rejected case-intake operations."""


class InvalidPhase(CaseIntakeError):
    def __init__(self, phase: object) -> None:
        super().__init__(f"Unknown case phase: {phase!r}")
        self.phase = phase


class ValidationIncomplete(CaseIntakeError):
    """Raised when generation is requested while the form gate is closed."""

    def __init__(self, template_id: str, field_ids: Iterable[str]) -> None:
        self.template_id = template_id
        self.field_ids = list(field_ids)
        super().__init__(
            f"Template {template_id} has incomplete or invalid fields: {', '.join(self.field_ids)}"
        )


class InvalidStatusTransition(CaseIntakeError):
    def __init__(self, current: object, requested: object) -> None:
        super().__init__(f"Cannot move document from {current} to {requested}")
        self.current = current
        self.requested = requested


class InvalidUploadState(CaseIntakeError):
    pass


class UploadFailed(CaseIntakeError):
    pass
