from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.qr_attendance.qr_attendance.activities.model import ActivitySchedule
from src.qr_attendance.qr_attendance.attendance.outcomes import AlreadyArrived, AlreadyDeparted, Arrived, Departed
from src.qr_attendance.qr_attendance.attendance.resolver import SessionResolver
from src.qr_attendance.qr_attendance.core.enums import AttendanceStatus
from src.qr_attendance.qr_attendance.core.exceptions import ConflictError

from fakes import InMemoryAttendance

NO_DEPARTURE = ActivitySchedule(start_time=time(9, 0), grace_period_minutes=15, allows_departure_scan=False)
WITH_DEPARTURE = ActivitySchedule(start_time=time(9, 0), grace_period_minutes=15, allows_departure_scan=True)


def _at(hour: int, minute: int, day: int = 2) -> datetime:
    return datetime(2026, 2, day, hour, minute)


def _resolve(resolver, schedule, instant, *, activity_id=1, participant_id=1):
    return resolver.resolve(activity_id=activity_id, participant_id=participant_id, schedule=schedule, instant=instant)


@pytest.fixture
def store():
    return InMemoryAttendance()


@pytest.fixture
def resolver(store):
    return SessionResolver(store)


def test_first_scan_creates_present_record(resolver, store):
    outcome = _resolve(resolver, NO_DEPARTURE, _at(9, 10))

    assert isinstance(outcome, Arrived)
    assert outcome.record.status == AttendanceStatus.PRESENT
    assert outcome.record.arrival_instant == _at(9, 10)
    assert outcome.record.departure_instant is None
    assert outcome.record.calendar_day == date(2026, 2, 2)
    assert len(store.records) == 1


def test_first_scan_after_grace_is_late(resolver):
    outcome = _resolve(resolver, NO_DEPARTURE, _at(9, 20))

    assert isinstance(outcome, Arrived)
    assert outcome.record.status == AttendanceStatus.LATE


def test_departure_flow_keeps_status(resolver, store):
    arrived = _resolve(resolver, WITH_DEPARTURE, _at(9, 10))
    departed = _resolve(resolver, WITH_DEPARTURE, _at(17, 0))

    assert isinstance(arrived, Arrived)
    assert isinstance(departed, Departed)
    assert departed.record.record_id == arrived.record.record_id
    assert departed.record.status == AttendanceStatus.PRESENT
    assert departed.record.departure_instant == _at(17, 0)
    assert store.writes == 2


def test_duplicate_without_departure_support_is_rejected(resolver, store):
    arrived = _resolve(resolver, NO_DEPARTURE, _at(9, 10))
    again = _resolve(resolver, NO_DEPARTURE, _at(9, 12))

    assert isinstance(again, AlreadyArrived)
    assert again.record == arrived.record
    assert store.writes == 1


def test_replays_after_departure_are_idempotent(resolver, store):
    _resolve(resolver, WITH_DEPARTURE, _at(9, 10))
    departed = _resolve(resolver, WITH_DEPARTURE, _at(17, 0))

    for minute in (1, 2, 30):
        outcome = _resolve(resolver, WITH_DEPARTURE, _at(17, minute))
        assert isinstance(outcome, AlreadyDeparted)
        assert outcome.record == departed.record
    # Even if the activity stops allowing departures the answer stays the same.
    assert isinstance(_resolve(resolver, NO_DEPARTURE, _at(18, 0)), AlreadyDeparted)
    assert store.writes == 2


def test_new_day_starts_a_new_record(resolver, store):
    _resolve(resolver, NO_DEPARTURE, _at(9, 10, day=2))
    outcome = _resolve(resolver, NO_DEPARTURE, _at(9, 5, day=3))

    assert isinstance(outcome, Arrived)
    assert len(store.records) == 2


def test_keys_are_per_activity_and_participant(resolver, store):
    assert isinstance(_resolve(resolver, NO_DEPARTURE, _at(9, 10), activity_id=1), Arrived)
    assert isinstance(_resolve(resolver, NO_DEPARTURE, _at(9, 10), activity_id=2), Arrived)
    assert isinstance(_resolve(resolver, NO_DEPARTURE, _at(9, 10), participant_id=2), Arrived)
    assert len(store.records) == 3


def test_departure_before_arrival_is_not_written(resolver, store):
    _resolve(resolver, WITH_DEPARTURE, _at(9, 10))
    outcome = _resolve(resolver, WITH_DEPARTURE, _at(9, 5))

    assert isinstance(outcome, AlreadyArrived)
    assert outcome.record.departure_instant is None
    assert store.writes == 1


class _RacingStore(InMemoryAttendance):
    """Looks empty on the first read, as if another station inserted meanwhile."""

    def __init__(self, winner_departed: bool = False):
        super().__init__()
        self._hide_once = True
        self._winner_departed = winner_departed

    def find_record(self, **kwargs):
        if self._hide_once:
            self._hide_once = False
            rec = super().create_record(
                activity_id=kwargs["activity_id"],
                participant_id=kwargs["participant_id"],
                calendar_day=kwargs["calendar_day"],
                arrival_instant=_at(9, 1),
                status=AttendanceStatus.PRESENT,
            )
            if self._winner_departed:
                super().set_departure(record_id=rec.record_id, departure_instant=_at(9, 2))
            return None
        return super().find_record(**kwargs)


def test_create_conflict_maps_to_already_arrived():
    store = _RacingStore()
    outcome = _resolve(SessionResolver(store), NO_DEPARTURE, _at(9, 10))

    assert isinstance(outcome, AlreadyArrived)
    assert outcome.record.arrival_instant == _at(9, 1)
    assert len(store.records) == 1


def test_create_conflict_with_departed_winner_maps_to_already_departed():
    outcome = _resolve(SessionResolver(_RacingStore(winner_departed=True)), WITH_DEPARTURE, _at(9, 10))
    assert isinstance(outcome, AlreadyDeparted)


class _DepartureRaceStore(InMemoryAttendance):
    def set_departure(self, *, record_id, departure_instant):
        super().set_departure(record_id=record_id, departure_instant=_at(16, 59))
        return super().set_departure(record_id=record_id, departure_instant=departure_instant)


def test_departure_conflict_maps_to_already_departed():
    store = _DepartureRaceStore()
    resolver = SessionResolver(store)
    _resolve(resolver, WITH_DEPARTURE, _at(9, 10))

    outcome = _resolve(resolver, WITH_DEPARTURE, _at(17, 0))

    assert isinstance(outcome, AlreadyDeparted)
    assert outcome.record.departure_instant == _at(16, 59)


class _BrokenStore(InMemoryAttendance):
    def create_record(self, **kwargs):
        raise ConflictError("constraint but no row")


def test_conflict_without_visible_winner_propagates():
    with pytest.raises(ConflictError):
        _resolve(SessionResolver(_BrokenStore()), NO_DEPARTURE, _at(9, 10))
