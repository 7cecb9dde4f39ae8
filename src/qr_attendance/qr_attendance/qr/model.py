from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QRPayload:
    """Signed content of a participant QR code (never persisted)."""

    participant_external_id: str
    issued_at: int
    signature: str
