import pytest

from caseintake.errors import InvalidStatusTransition, ValidationIncomplete
from caseintake.forms import (
    DocumentGenerator,
    advance_status,
    can_generate,
    initial_form_data,
    missing_required_fields,
    render_body,
    validate_form,
)
from caseintake.types import (
    DocumentCategory,
    DocumentStatus,
    DocumentTemplate,
    DocumentType,
    FieldType,
    FormField,
)

from conftest import NOW

SIMPLE = DocumentTemplate(
    id="simple",
    name="Simple",
    description="Two fields",
    category=DocumentCategory.CORRESPONDENCE,
    fields=(
        FormField(id="a", label="A", type=FieldType.TEXT, required=True),
        FormField(id="b", label="B", type=FieldType.TEXT, required=False),
    ),
    body_template="A={a} B={b}",
)


def _eeoc_form(**overrides):
    form = {
        "complainant-name": "John Smith",
        "employer-name": "ABC Corporation",
        "discrimination-basis": "Race",
        "incident-date": "2023-12-15",
        "incident-description": "Passed over for promotion after complaint.",
    }
    form.update(overrides)
    return form


def test_required_field_gate():
    assert not can_generate(SIMPLE, {"a": ""})
    assert can_generate(SIMPLE, {"a": "x"})
    assert missing_required_fields(SIMPLE, {"a": ""}) == ["a"]
    assert missing_required_fields(SIMPLE, {}) == ["a"]


def test_non_string_values_do_not_satisfy_required():
    assert not can_generate(SIMPLE, {"a": None})


def test_initial_form_data_is_blank():
    assert initial_form_data(SIMPLE) == {"a": "", "b": ""}


def test_declared_constraints_are_enforced(dataset):
    template = dataset.templates.get_by_id("template-1")

    assert validate_form(template, _eeoc_form()) == []

    errors = validate_form(template, _eeoc_form(**{"incident-date": "12/15/2023"}))
    assert [(error.field_id, error.message) for error in errors] == [
        ("incident-date", "Use the YYYY-MM-DD format")
    ]

    errors = validate_form(template, _eeoc_form(**{"discrimination-basis": "Height"}))
    assert [error.field_id for error in errors] == ["discrimination-basis"]

    errors = validate_form(template, _eeoc_form(**{"complainant-name": "J"}))
    assert errors[0].message == "Your Full Name must be at least 2 characters"


def test_number_fields(dataset):
    template = dataset.templates.get_by_id("template-2")
    form = {
        "recipient-name": "ABC Corporation HR Department",
        "violation-type": "Employment Discrimination",
        "demand-description": "Reinstatement",
    }

    assert can_generate(template, form)
    assert can_generate(template, {**form, "damages-amount": "50000"})
    assert not can_generate(template, {**form, "damages-amount": "lots"})
    assert not can_generate(template, {**form, "damages-amount": "-5"})
    for value in ("nan", "inf", "-inf"):
        assert not can_generate(template, {**form, "damages-amount": value})
    assert [error.message for error in validate_form(template, {**form, "damages-amount": "nan"})] == [
        "Damages Sought must be a number"
    ]


def test_render_body_keeps_unknown_placeholders():
    assert render_body(SIMPLE, {"a": "1"}) == "A=1 B={b}"


def test_generate_document(dataset, clock):
    template = dataset.templates.get_by_id("template-1")
    delays = []
    generator = DocumentGenerator(clock, delay_seconds=2.0, sleep=delays.append)

    document = generator.generate(template, _eeoc_form())

    assert delays == [2.0]
    assert document.title == "EEOC Complaint Form - John Smith"
    assert document.document_type is DocumentType.COMPLAINT
    assert document.template_ref == "template-1"
    assert document.status is DocumentStatus.DRAFT
    assert document.created_at == document.updated_at == NOW
    assert "Respondent: ABC Corporation" in document.content
    assert document.generated_data["incident-date"] == "2023-12-15"


def test_generate_refuses_incomplete_form(dataset, clock):
    template = dataset.templates.get_by_id("template-3")
    generator = DocumentGenerator(clock, delay_seconds=0)

    with pytest.raises(ValidationIncomplete) as excinfo:
        generator.generate(template, {"agency-name": "FBI"})
    assert excinfo.value.field_ids == ["records-description"]


def test_untitled_when_first_field_blank(clock):
    template = DocumentTemplate(
        id="t",
        name="Note",
        description="",
        category=DocumentCategory.CORRESPONDENCE,
        fields=(FormField(id="x", label="X", type=FieldType.TEXT),),
        body_template="",
    )
    document = DocumentGenerator(clock, delay_seconds=0).generate(template, {"x": ""})
    assert document.title == "Note - Untitled"


def test_status_only_moves_forward(dataset, clock):
    document = dataset.documents.get_by_id("doc-1")

    advance_status(document, DocumentStatus.REVIEW, clock)
    assert document.status is DocumentStatus.REVIEW
    assert document.updated_at == NOW

    advance_status(document, "filed", clock)
    assert document.status is DocumentStatus.FILED

    with pytest.raises(InvalidStatusTransition):
        advance_status(document, DocumentStatus.FINAL, clock)
    with pytest.raises(InvalidStatusTransition):
        advance_status(document, DocumentStatus.FILED, clock)
