from typer.testing import CliRunner

from caseintake.cli import app

from conftest import FIXTURE

runner = CliRunner()
NOW_ARG = "2024-01-15T00:00:00Z"


def test_progress_command():
    result = runner.invoke(app, ["progress", "case-1", "--now", NOW_ARG, "--fixture", str(FIXTURE)])

    assert result.exit_code == 0, result.output
    assert "case-1: 67% (8 of 12 tasks complete)" in result.output
    assert "Phase 3 of 8; time remaining: 45d" in result.output
    assert "[  current] Evidence Collection" in result.output


def test_timeline_command_flags_upcoming_deadline():
    result = runner.invoke(app, ["timeline", "case-1", "--now", NOW_ARG, "--fixture", str(FIXTURE)])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("- 10/15/2023: Initial Discriminatory Incident")
    assert "- 0 days ago: Legal Consultation [medium]" in lines
    assert lines[-1] == "! 2/15/2024 (Upcoming): EEOC Filing Deadline [high]"


def test_evidence_command_filters():
    result = runner.invoke(app, ["evidence", "--query", "email", "--fixture", str(FIXTURE)])

    assert result.exit_code == 0, result.output
    assert "evidence-1: Discriminatory Email Chain (95%)" in result.output
    assert "evidence-2" not in result.output
    assert "Showing 1 of 4" in result.output


def test_templates_command():
    result = runner.invoke(app, ["templates", "--category", "evidence-requests", "--fixture", str(FIXTURE)])

    assert result.exit_code == 0, result.output
    assert "template-3: FOIA Request (2 required fields)" in result.output
    assert "template-1" not in result.output


def test_generate_and_list_documents(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"
    result = runner.invoke(
        app,
        [
            "generate",
            "template-3",
            "--field",
            "agency-name=Department of Justice",
            "--field",
            "records-description=Use-of-force reports for precinct 12",
            "--save",
            "--db-url",
            db_url,
            "--fixture",
            str(FIXTURE),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "FOIA Request - Department of Justice [draft]" in result.output
    assert "Agency: Department of Justice" in result.output

    listed = runner.invoke(app, ["documents", "--db-url", db_url])
    assert listed.exit_code == 0, listed.output
    assert "FOIA Request - Department of Justice [draft]" in listed.output


def test_generate_reports_missing_fields():
    result = runner.invoke(
        app,
        ["generate", "template-3", "--field", "agency-name=FBI", "--fixture", str(FIXTURE)],
    )

    assert result.exit_code == 1
    assert "records-description: Records Requested is required" in result.output


def test_analyze_command():
    result = runner.invoke(
        app,
        [
            "analyze",
            "--title",
            "Denied rental",
            "--description",
            "Application rejected after accommodation request",
            "--case-type",
            "housing-discrimination",
            "--fixture",
            str(FIXTURE),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Case strength 65/100 (moderate, confidence 72%)" in result.output


def test_now_accepts_offsets_and_naive_timestamps():
    for now in (NOW_ARG, "2024-01-15T02:00:00+02:00", "2024-01-15T00:00:00"):
        result = runner.invoke(app, ["timeline", "case-1", "--now", now, "--fixture", str(FIXTURE)])
        assert result.exit_code == 0, result.output
        assert "- 0 days ago: Legal Consultation [medium]" in result.output
        assert "! 2/15/2024 (Upcoming): EEOC Filing Deadline [high]" in result.output


def test_invalid_now_is_a_usage_error():
    result = runner.invoke(app, ["progress", "case-1", "--now", "next tuesday", "--fixture", str(FIXTURE)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def _analyze(*extra):
    return runner.invoke(
        app,
        [
            "analyze",
            "--title",
            "Denied rental",
            "--description",
            "Application rejected after accommodation request",
            "--fixture",
            str(FIXTURE),
            *extra,
        ],
    )


def test_analyze_rejects_unknown_case_type():
    result = _analyze("--case-type", "bogus")

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_analyze_rejects_unknown_urgency():
    result = _analyze("--case-type", "housing-discrimination", "--urgency", "whenever")

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
