from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import Activity


class ActivityRepository(Protocol):
    def get_by_id(self, activity_id: int) -> Optional[Activity]:
        raise NotImplementedError

    def list_for_owner(self, owner_id: int) -> Sequence[Activity]:
        raise NotImplementedError

    def create(
        self,
        *,
        owner_id: int,
        title: str,
        start_time: time,
        end_time: time,
        grace_period_minutes: int,
        allows_departure_scan: bool,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        activity_id: int,
        *,
        title: str,
        start_time: time,
        end_time: time,
        grace_period_minutes: int,
        allows_departure_scan: bool,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def delete(self, activity_id: int) -> None:
        """Remove the activity together with its enrollments and attendance records."""

        raise NotImplementedError
