from __future__ import annotations

from datetime import time

import pytest

from src.qr_attendance.qr_attendance.activities.model import Activity
from src.qr_attendance.qr_attendance.core.exceptions import NotFoundError, ValidationError
from src.qr_attendance.qr_attendance.participants.service import ParticipantService
from src.qr_attendance.qr_attendance.qr import codec

from fakes import InMemoryActivities, InMemoryParticipants


@pytest.fixture
def activities():
    repo = InMemoryActivities()
    for activity_id, owner_id in [(1, 7), (2, 7), (3, 8)]:
        repo.add(
            Activity(
                activity_id=activity_id,
                owner_id=owner_id,
                title=f"Activity {activity_id}",
                start_time=time(9, 0),
                end_time=time(10, 0),
                grace_period_minutes=15,
            )
        )
    return repo


@pytest.fixture
def participants(activities):
    return InMemoryParticipants(activities)


@pytest.fixture
def svc(participants, activities):
    return ParticipantService(participants, activities)


def test_register_generates_secret(svc):
    p = svc.register(external_id=" S-100 ", first_name="Grace", last_name="Hopper", section="B", email=" ")

    assert p.external_id == "S-100"
    assert p.email is None
    assert len(p.qr_secret) == 64
    assert "qr_secret" not in svc.to_public(p)
    assert p.qr_secret not in repr(p)


def test_register_rejects_duplicates_and_missing_fields(svc):
    svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B")

    with pytest.raises(ValidationError):
        svc.register(external_id="S-100", first_name="Other", last_name="Person", section="B")
    with pytest.raises(ValidationError):
        svc.register(external_id="S-101", first_name="", last_name="Person", section="B")


def test_issued_qr_verifies_with_participant_secret(svc):
    p = svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B")

    payload = codec.deserialize(svc.issue_qr(p.participant_id, now=1_700_000_000))

    assert payload.participant_external_id == "S-100"
    assert payload.issued_at == 1_700_000_000
    assert codec.verify(payload, p.qr_secret)


def test_issue_qr_for_unknown_participant(svc):
    with pytest.raises(NotFoundError):
        svc.issue_qr(42)


def test_render_qr_png(svc):
    p = svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B")

    png = svc.render_qr_png(p.participant_id)
    assert png.startswith(b"\x89PNG")
    assert svc.render_qr_data_url(p.participant_id).startswith("data:image/png;base64,")


def test_register_with_owner_enrolls_in_owner_activities(svc, participants):
    p = svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B", owner_id=7)

    assert participants.enrollments == {(p.participant_id, 1), (p.participant_id, 2)}


def test_list_is_scoped_to_owner(svc):
    svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B", owner_id=7)
    svc.register(external_id="S-101", first_name="Alan", last_name="Turing", section="B", owner_id=8)
    svc.register(external_id="S-102", first_name="Edsger", last_name="Dijkstra", section="B")

    assert [p.external_id for p in svc.list_for_owner(7)] == ["S-100"]
    assert [p.external_id for p in svc.list_for_owner(8)] == ["S-101"]
    assert svc.list_for_owner(9) == []


def test_owner_without_activities_enrolls_nothing(svc, participants):
    svc.register(external_id="S-100", first_name="Grace", last_name="Hopper", section="B", owner_id=9)

    assert participants.enrollments == set()
