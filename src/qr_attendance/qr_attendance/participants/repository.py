from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Participant


class ParticipantRepository(Protocol):
    """Repository interface for participants.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, participant_id: int) -> Optional[Participant]:
        raise NotImplementedError

    def get_by_external_id(self, external_id: str) -> Optional[Participant]:
        raise NotImplementedError

    def create(
        self,
        *,
        external_id: str,
        first_name: str,
        last_name: str,
        section: str,
        qr_secret: str,
        email: Optional[str] = None,
    ) -> int:
        """Insert a participant; raises ConflictError when external_id is taken."""

        raise NotImplementedError

    def list_for_owner(self, owner_id: int) -> Sequence[Participant]:
        """Participants enrolled in at least one activity owned by `owner_id`."""

        raise NotImplementedError

    def enroll(self, participant_id: int, activity_id: int) -> None:
        """Link a participant to an activity; enrolling twice is a no-op."""

        raise NotImplementedError
