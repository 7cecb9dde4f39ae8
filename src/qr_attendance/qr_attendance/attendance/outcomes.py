"""Results of submitting one scan.

Every scan ends in exactly one of these. Rejections are values, not
exceptions, so the caller can show a distinct message for each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ..core.enums import AttendanceStatus
from ..participants.model import Participant
from .model import AttendanceRecord


@dataclass(frozen=True)
class Arrived:
    kind: ClassVar[str] = "arrived"
    record: AttendanceRecord
    participant: Optional[Participant] = None


@dataclass(frozen=True)
class Departed:
    kind: ClassVar[str] = "departed"
    record: AttendanceRecord
    participant: Optional[Participant] = None


@dataclass(frozen=True)
class AlreadyArrived:
    kind: ClassVar[str] = "already_arrived"
    record: AttendanceRecord
    participant: Optional[Participant] = None


@dataclass(frozen=True)
class AlreadyDeparted:
    kind: ClassVar[str] = "already_departed"
    record: AttendanceRecord
    participant: Optional[Participant] = None


@dataclass(frozen=True)
class InvalidQRFormat:
    kind: ClassVar[str] = "invalid_qr_format"


@dataclass(frozen=True)
class InvalidSignature:
    kind: ClassVar[str] = "invalid_signature"
    participant_external_id: str


@dataclass(frozen=True)
class QRExpired:
    kind: ClassVar[str] = "qr_expired"
    participant_external_id: str


@dataclass(frozen=True)
class ParticipantNotFound:
    kind: ClassVar[str] = "participant_not_found"
    participant_external_id: str


@dataclass(frozen=True)
class ActivityNotFound:
    kind: ClassVar[str] = "activity_not_found"
    activity_id: int


RecordOutcome = Union[Arrived, Departed, AlreadyArrived, AlreadyDeparted]
ScanOutcome = Union[
    Arrived,
    Departed,
    AlreadyArrived,
    AlreadyDeparted,
    InvalidQRFormat,
    InvalidSignature,
    QRExpired,
    ParticipantNotFound,
    ActivityNotFound,
]

RECORD_OUTCOMES = (Arrived, Departed, AlreadyArrived, AlreadyDeparted)


def describe(outcome: ScanOutcome) -> str:
    """User-facing message for a scan outcome."""

    if isinstance(outcome, RECORD_OUTCOMES):
        name = outcome.participant.full_name if outcome.participant else f"Participant #{outcome.record.participant_id}"
        if isinstance(outcome, Arrived):
            label = "Present" if outcome.record.status == AttendanceStatus.PRESENT else "Late"
            return f"{label}: {name}"
        if isinstance(outcome, Departed):
            return f"Time-out recorded for {name}"
        if isinstance(outcome, AlreadyArrived):
            return f"{name} already scanned in today"
        return f"{name} already scanned out today"

    if isinstance(outcome, InvalidQRFormat):
        return "Invalid QR code format"
    if isinstance(outcome, InvalidSignature):
        return "Invalid QR code signature"
    if isinstance(outcome, QRExpired):
        return "QR code has expired"
    if isinstance(outcome, ParticipantNotFound):
        return "Participant not found"
    if isinstance(outcome, ActivityNotFound):
        return "Activity not found"
    raise TypeError(f"Unknown scan outcome: {outcome!r}")
