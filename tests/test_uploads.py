import pytest

from caseintake.errors import InvalidUploadState, UploadFailed
from caseintake.types import EvidenceCategory, EvidenceType, FileInfo
from caseintake.uploads import (
    UploadSession,
    UploadState,
    detect_evidence_type,
    parse_tags,
    simulate_upload,
    to_evidence,
)

from conftest import NOW

PHOTO = FileInfo(name="incident.front-door.jpg", size_bytes=2_400_000, mime_type="image/jpeg")


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [
        ("image/png", EvidenceType.PHOTO),
        ("video/mp4", EvidenceType.VIDEO),
        ("audio/mpeg", EvidenceType.AUDIO),
        ("application/pdf", EvidenceType.DOCUMENT),
        ("", EvidenceType.DOCUMENT),
    ],
)
def test_detect_evidence_type(mime_type, expected):
    assert detect_evidence_type(mime_type) is expected


def test_parse_tags():
    assert parse_tags(" harassment, workplace ,,") == ["harassment", "workplace"]


def test_simulated_upload_reaches_uploaded():
    delays = []
    session = simulate_upload(UploadSession(), PHOTO, sleep=delays.append, step_delay=0.1)

    assert session.state is UploadState.UPLOADED
    assert session.progress == 100
    assert session.type is EvidenceType.PHOTO
    assert session.title == "incident"
    assert len(delays) == 11


def test_progress_is_monotonic():
    session = UploadSession()
    session.start(PHOTO)
    session.advance(40)
    with pytest.raises(ValueError):
        session.advance(30)
    with pytest.raises(ValueError):
        session.advance(120)
    assert session.state is UploadState.UPLOADING


def test_only_one_upload_at_a_time():
    session = UploadSession()
    session.start(PHOTO)
    with pytest.raises(InvalidUploadState):
        session.start(PHOTO)


def test_submit_requires_details(clock):
    session = simulate_upload(UploadSession(), PHOTO, sleep=lambda _: None)
    assert not session.can_submit
    with pytest.raises(InvalidUploadState):
        session.submit()

    session.update_details(
        description="Damage to office door",
        category="incident-documentation",
        tags="harassment, workplace",
    )
    draft = session.submit()

    assert session.state is UploadState.SUBMITTED
    assert draft.category is EvidenceCategory.INCIDENT_DOCUMENTATION
    assert draft.tags == ["harassment", "workplace"]
    assert draft.notes is None

    evidence = to_evidence(draft, clock)
    assert evidence.id.startswith("evidence-")
    assert evidence.uploaded_at == NOW
    assert evidence.file_ref == PHOTO.name


def test_cancel_discards_state():
    session = simulate_upload(UploadSession(), PHOTO, sleep=lambda _: None)
    session.update_details(description="will be dropped")
    session.cancel()

    assert session.state is UploadState.IDLE
    assert session.file is None
    assert session.description == ""
    assert session.progress == 0


def test_transport_failure_marks_session_failed():
    def flaky(file_info, progress):
        if progress >= 50:
            raise OSError("connection reset")

    session = UploadSession()
    with pytest.raises(UploadFailed):
        simulate_upload(session, PHOTO, transport=flaky, sleep=lambda _: None)

    assert session.state is UploadState.FAILED
    assert session.progress == 40
    assert session.error == "connection reset"

    session.cancel()
    assert session.state is UploadState.IDLE


def test_update_details_rejects_unknown_fields():
    session = simulate_upload(UploadSession(), PHOTO, sleep=lambda _: None)
    with pytest.raises(AttributeError):
        session.update_details(file="other.pdf")


def test_cancel_is_not_a_resting_state():
    assert {state.value for state in UploadState} == {"idle", "uploading", "uploaded", "submitted", "failed"}

    session = UploadSession()
    with pytest.raises(InvalidUploadState):
        session.cancel()

    session.start(PHOTO)
    session.advance(30)
    session.cancel()
    assert session.state is UploadState.IDLE


def test_completing_without_a_file_is_rejected():
    session = UploadSession()
    session.start(PHOTO)
    session.file = None

    with pytest.raises(InvalidUploadState):
        session.advance(100)
    assert session.state is UploadState.UPLOADING


def test_submit_without_a_file_is_rejected():
    session = simulate_upload(UploadSession(), PHOTO, sleep=lambda _: None)
    session.update_details(description="Damage to office door", category="incident-documentation")
    session.file = None

    assert session.can_submit
    with pytest.raises(InvalidUploadState):
        session.submit()
    assert session.state is UploadState.UPLOADED
