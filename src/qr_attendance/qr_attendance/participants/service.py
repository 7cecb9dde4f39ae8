from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..activities.repository import ActivityRepository
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..qr import codec, renderer
from .model import Participant
from .repository import ParticipantRepository

logger = logging.getLogger(__name__)


class ParticipantService:
    def __init__(self, participants: ParticipantRepository, activities: ActivityRepository):
        self._participants = participants
        self._activities = activities

    def register(
        self,
        *,
        external_id: str,
        first_name: str,
        last_name: str,
        section: str,
        email: Optional[str] = None,
        owner_id: Optional[int] = None,
    ) -> Participant:
        """Create a participant with a fresh QR secret.

        With `owner_id`, the participant is enrolled in every activity that owner
        runs, which is what puts them on the owner's participant list.
        """
        external_id = require_non_empty(external_id, "external_id")
        first_name = require_non_empty(first_name, "first_name")
        last_name = require_non_empty(last_name, "last_name")
        section = require_non_empty(section, "section")
        email = email.strip() if email and email.strip() else None

        if self._participants.get_by_external_id(external_id):
            raise ValidationError("Participant ID already exists")

        secret = codec.generate_secret()
        try:
            participant_id = self._participants.create(
                external_id=external_id,
                first_name=first_name,
                last_name=last_name,
                section=section,
                email=email,
                qr_secret=secret,
            )
        except ConflictError:
            raise ValidationError("Participant ID already exists") from None

        logger.info("registered participant %s (id=%s)", external_id, participant_id)
        if owner_id is not None:
            activities = self._activities.list_for_owner(int(owner_id))
            for activity in activities:
                self._participants.enroll(participant_id, activity.activity_id)
            logger.info("enrolled participant %s in %d activities of owner %s", external_id, len(activities), owner_id)

        return Participant(
            participant_id=participant_id,
            external_id=external_id,
            first_name=first_name,
            last_name=last_name,
            section=section,
            email=email,
            qr_secret=secret,
        )

    def list_for_owner(self, owner_id: int) -> Sequence[Participant]:
        return self._participants.list_for_owner(int(owner_id))

    def _require(self, participant_id: int) -> Participant:
        participant = self._participants.get_by_id(int(participant_id))
        if not participant:
            raise NotFoundError("Participant not found")
        return participant

    def issue_qr(self, participant_id: int, *, now: Optional[int] = None) -> str:
        """Fresh signed payload string for the participant's QR code."""
        participant = self._require(participant_id)
        payload = codec.issue(participant.external_id, participant.qr_secret, now=now)
        return codec.serialize(payload)

    def render_qr_png(self, participant_id: int) -> bytes:
        return renderer.render_png(self.issue_qr(participant_id))

    def render_qr_data_url(self, participant_id: int) -> str:
        return renderer.render_data_url(self.issue_qr(participant_id))

    @staticmethod
    def to_public(participant: Participant) -> dict:
        return {
            "participant_id": participant.participant_id,
            "external_id": participant.external_id,
            "first_name": participant.first_name,
            "last_name": participant.last_name,
            "section": participant.section,
            "email": participant.email,
        }
