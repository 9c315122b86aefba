from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from caseintake.analysis import CannedAnalyzer, IntakeForm, missing_intake_fields, summarize_analysis
from caseintake.clock import Clock, FixedClock, SystemClock, parse_datetime
from caseintake.config import Settings
from caseintake.errors import CaseIntakeError
from caseintake.forms import DocumentGenerator, initial_form_data, validate_form
from caseintake.progress import summarize_progress
from caseintake.repository import FixtureDataset
from caseintake.search import ALL, evidence_stats, filter_evidence, filter_templates, template_stats
from caseintake.storage import DocumentStore, create_session_factory, init_db
from caseintake.timeline import build_timeline_view

app = typer.Typer(help="Civil-rights case intake CLI")


@app.callback()
def configure_logging(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def _load(fixture: Optional[Path]) -> FixtureDataset:
    settings = Settings()
    return FixtureDataset.load(fixture or settings.fixture_path)


@app.command("progress")
def show_progress(
    case_id: str = typer.Argument(..., help="Case id, e.g. case-1"),
    now: Optional[str] = typer.Option(None, help="ISO timestamp to use as the current time"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    dataset = _load(fixture)
    progress = dataset.progress_for_case(case_id)
    if progress is None:
        raise typer.BadParameter(f"No progress recorded for case {case_id}")

    summary = summarize_progress(progress, _clock(now))
    typer.echo(
        f"{summary.case_id}: {summary.completion_percentage}% "
        f"({summary.completed_tasks} of {summary.total_tasks} tasks complete)"
    )
    typer.echo(f"{summary.phase_position}; time remaining: {summary.days_label}")
    typer.echo(f"Next milestone: {summary.next_milestone}")
    for step in summary.steps:
        typer.echo(f"  [{step.state.value:>9}] {step.label}")


@app.command("timeline")
def show_timeline(
    case_id: str = typer.Argument(..., help="Case id, e.g. case-1"),
    now: Optional[str] = typer.Option(None, help="ISO timestamp to use as the current time"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    dataset = _load(fixture)
    timeline = dataset.timeline_for_case(case_id)
    if timeline is None:
        raise typer.BadParameter(f"No timeline for case {case_id}")

    for entry in build_timeline_view(timeline, _clock(now)):
        marker = "!" if entry.needs_action else "-"
        typer.echo(f"{marker} {entry.label}: {entry.event.title} [{entry.event.importance.value}]")


@app.command("evidence")
def list_evidence(
    query: str = typer.Option("", "--query", "-q", help="Substring to match in title, description or tags"),
    evidence_type: str = typer.Option(ALL, "--type", help="Evidence type or 'all'"),
    category: str = typer.Option(ALL, help="Evidence category or 'all'"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    dataset = _load(fixture)
    items = dataset.evidence.list()
    matches = filter_evidence(items, query, evidence_type, category)
    for item in matches:
        score = f" ({item.relevance_score}%)" if item.relevance_score is not None else ""
        typer.echo(f"{item.id}: {item.title}{score} [{', '.join(item.tags)}]")

    stats = evidence_stats(items)
    typer.echo(
        f"Showing {len(matches)} of {stats.total} "
        f"(photos={stats.photos} documents={stats.documents} videos={stats.videos} "
        f"high_relevance={stats.high_relevance})"
    )


@app.command("templates")
def list_templates(
    query: str = typer.Option("", "--query", "-q", help="Substring to match in name or description"),
    category: str = typer.Option(ALL, help="Template category or 'all'"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    dataset = _load(fixture)
    templates = dataset.templates.list()
    for template in filter_templates(templates, query, category):
        required = sum(1 for form_field in template.fields if form_field.required)
        typer.echo(f"{template.id}: {template.name} ({required} required fields)")

    stats = template_stats(templates, generated_count=len(dataset.documents))
    typer.echo(
        f"total={stats.total} filings={stats.filings} correspondence={stats.correspondence} "
        f"requests={stats.requests} generated={stats.generated}"
    )


@app.command("generate")
def generate_document(
    template_id: str = typer.Argument(..., help="Template id, e.g. template-1"),
    field: List[str] = typer.Option([], "--field", "-f", help="Form value as FIELD_ID=VALUE; repeatable"),
    db_url: Optional[str] = typer.Option(None, envvar="CASEINTAKE_DATABASE_URL"),
    save: bool = typer.Option(False, "--save/--no-save", help="Persist the generated document"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    dataset = _load(fixture)
    template = dataset.templates.get_by_id(template_id)
    if template is None:
        raise typer.BadParameter(f"Unknown template {template_id}")

    form_data = initial_form_data(template)
    form_data.update(_parse_fields(field))

    errors = validate_form(template, form_data)
    if errors:
        for error in errors:
            typer.echo(f"{error.field_id}: {error.message}", err=True)
        raise typer.Exit(code=1)

    try:
        document = DocumentGenerator(delay_seconds=0).generate(template, form_data)
    except CaseIntakeError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if save:
        session_factory, engine = create_session_factory(db_url)
        init_db(engine)
        DocumentStore(session_factory).save(document)

    typer.echo(f"Generated {document.id}: {document.title} [{document.status.value}]")
    typer.echo(document.content)


@app.command("documents")
def list_documents(db_url: Optional[str] = typer.Option(None, envvar="CASEINTAKE_DATABASE_URL")) -> None:
    session_factory, engine = create_session_factory(db_url)
    init_db(engine)
    for document in DocumentStore(session_factory).list():
        typer.echo(f"{document.id}: {document.title} [{document.status.value}] updated {document.updated_at.isoformat()}")


@app.command("analyze")
def analyze_case(
    title: str = typer.Option("", help="Brief title describing the case"),
    description: str = typer.Option("", help="What happened, when, and who was involved"),
    case_type: str = typer.Option("", help="Case type, e.g. employment-discrimination"),
    urgency: str = typer.Option("medium", help="low, medium, high or critical"),
    fixture: Optional[Path] = typer.Option(None, help="Path to fixture JSON"),
) -> None:
    form = IntakeForm(title=title, description=description, case_type=case_type, urgency=urgency)
    missing = missing_intake_fields(form)
    if missing:
        raise typer.BadParameter(f"Missing required fields: {', '.join(missing)}")

    dataset = _load(fixture)
    if dataset.default_analysis is None:
        raise typer.BadParameter("Fixture has no default analysis")
    analyzer = CannedAnalyzer(dataset.default_analysis, dataset.analyses_by_case_type())
    try:
        assessment = analyzer.analyze(form)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if assessment.analysis is None:
        raise typer.BadParameter(f"No analysis available for {assessment.case_type.value}")
    typer.echo(summarize_analysis(assessment.analysis))


@app.command("init-db")
def initialize_database(db_url: Optional[str] = typer.Option(None, envvar="CASEINTAKE_DATABASE_URL")) -> None:
    _, engine = create_session_factory(db_url)
    init_db(engine)
    typer.echo("Database initialized")


def _parse_fields(values: List[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected FIELD_ID=VALUE, got {raw!r}")
        parsed[key.strip()] = value
    return parsed


def _clock(now: Optional[str]) -> Clock:
    if not now:
        return SystemClock()
    try:
        return FixedClock(parse_datetime(now))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid --now timestamp {now!r}") from exc


if __name__ == "__main__":
    app()
