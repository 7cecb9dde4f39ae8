from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """Domain entity: a person who scans in with a personal QR code.

    Note: `qr_secret` is the signing key for the participant's codes. It is kept
    out of repr and must never be returned by the API.
    """

    participant_id: int
    external_id: str
    first_name: str
    last_name: str
    section: str
    qr_secret: str = field(repr=False)
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
