from __future__ import annotations

import logging
import math
import re
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from caseintake.clock import Clock, SystemClock
from caseintake.config import settings
from caseintake.errors import InvalidStatusTransition, ValidationIncomplete
from caseintake.types import (
    STATUS_ORDER,
    DocumentStatus,
    DocumentTemplate,
    FieldType,
    FormField,
    GeneratedDocument,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_-]+)\}")


@dataclass(slots=True)
class FieldError:
    field_id: str
    message: str


def initial_form_data(template: DocumentTemplate) -> dict[str, str]:
    return {form_field.id: "" for form_field in template.fields}


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def missing_required_fields(template: DocumentTemplate, form_data: Mapping[str, Any]) -> list[str]:
    return [
        form_field.id
        for form_field in template.fields
        if form_field.required and not _is_filled(form_data.get(form_field.id))
    ]


def _check_constraints(form_field: FormField, value: str) -> str | None:
    """Return a default error message for the first failed constraint, else None."""

    if form_field.type is FieldType.SELECT and form_field.options and value not in form_field.options:
        return f"{form_field.label} must be one of: {', '.join(form_field.options)}"

    rules = form_field.validation
    if form_field.type is FieldType.NUMBER:
        try:
            number = float(value)
        except ValueError:
            return f"{form_field.label} must be a number"
        if not math.isfinite(number):
            return f"{form_field.label} must be a number"
        if rules and rules.min is not None and number < rules.min:
            return f"{form_field.label} must be at least {rules.min:g}"
        if rules and rules.max is not None and number > rules.max:
            return f"{form_field.label} must be at most {rules.max:g}"

    if rules is None:
        return None
    if rules.min_length is not None and len(value) < rules.min_length:
        return f"{form_field.label} must be at least {rules.min_length} characters"
    if rules.max_length is not None and len(value) > rules.max_length:
        return f"{form_field.label} must be at most {rules.max_length} characters"
    if rules.pattern is not None and re.fullmatch(rules.pattern, value) is None:
        return f"{form_field.label} has an invalid format"
    return None


def validate_form(template: DocumentTemplate, form_data: Mapping[str, Any]) -> list[FieldError]:
    """
    Check every field of ``template`` against ``form_data``.

    Required fields must hold a non-empty string. Declared constraints are only
    checked for fields that have a value, so optional blanks always pass. A
    field's ``custom_message`` replaces the default message when present.
    """

    errors: list[FieldError] = []
    for form_field in template.fields:
        value = form_data.get(form_field.id)
        custom = form_field.validation.custom_message if form_field.validation else None
        if not _is_filled(value):
            if form_field.required:
                errors.append(FieldError(form_field.id, custom or f"{form_field.label} is required"))
            continue
        message = _check_constraints(form_field, value)
        if message is not None:
            errors.append(FieldError(form_field.id, custom or message))
    return errors


def can_generate(template: DocumentTemplate, form_data: Mapping[str, Any]) -> bool:
    return not validate_form(template, form_data)


def render_body(template: DocumentTemplate, form_data: Mapping[str, Any]) -> str:
    """Substitute ``{field_id}`` placeholders; unknown placeholders are left as-is."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in form_data:
            return str(form_data[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template.body_template)


class DocumentGenerator:
    """Builds draft documents from a template after a simulated processing delay."""

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        delay_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.clock = clock or SystemClock()
        self.delay_seconds = settings.generation_delay_seconds if delay_seconds is None else delay_seconds
        self._sleep = sleep

    def generate(self, template: DocumentTemplate, form_data: Mapping[str, Any]) -> GeneratedDocument:
        errors = validate_form(template, form_data)
        if errors:
            raise ValidationIncomplete(template.id, (error.field_id for error in errors))

        logger.info("Generating document", extra={"template_id": template.id})
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

        first_value = form_data.get(template.fields[0].id) if template.fields else None
        now = self.clock.now()
        document = GeneratedDocument(
            id=f"doc-{uuid.uuid4().hex[:12]}",
            title=f"{template.name} - {first_value or 'Untitled'}",
            document_type=template.document_type,
            template_ref=template.id,
            content=render_body(template, form_data),
            status=DocumentStatus.DRAFT,
            created_at=now,
            updated_at=now,
            generated_data=dict(form_data),
        )
        logger.info("Document generated", extra={"template_id": template.id, "document_id": document.id})
        return document


def advance_status(
    document: GeneratedDocument,
    status: DocumentStatus | str,
    clock: Clock | None = None,
) -> GeneratedDocument:
    target = DocumentStatus(status)
    if STATUS_ORDER.index(target) <= STATUS_ORDER.index(document.status):
        raise InvalidStatusTransition(document.status.value, target.value)
    document.status = target
    document.updated_at = (clock or SystemClock()).now()
    return document
