from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_bool, require_non_empty, require_non_negative_int, require_time_of_day
from ..core.constants import DEFAULT_GRACE_PERIOD_MINUTES
from ..core.exceptions import NotFoundError, ValidationError
from .model import Activity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


def _require_owner(owner_id) -> int:
    try:
        owner = int(owner_id)
    except (TypeError, ValueError):
        raise ValidationError("owner_id is invalid") from None
    if owner <= 0:
        raise ValidationError("owner_id is invalid")
    return owner


class ActivityService:
    def __init__(self, activities: ActivityRepository, *, default_grace_minutes: int = DEFAULT_GRACE_PERIOD_MINUTES):
        self._activities = activities
        self._default_grace_minutes = int(default_grace_minutes)

    def _fields(
        self,
        *,
        title,
        start_time,
        end_time,
        grace_period_minutes,
        allows_departure_scan,
        description,
        room,
    ) -> dict:
        if grace_period_minutes is None:
            grace = self._default_grace_minutes
        else:
            grace = require_non_negative_int(grace_period_minutes, "grace_period_minutes")
        return dict(
            title=require_non_empty(title, "title"),
            start_time=require_time_of_day(start_time, "start_time"),
            end_time=require_time_of_day(end_time, "end_time"),
            grace_period_minutes=grace,
            allows_departure_scan=require_bool(allows_departure_scan, "allows_departure_scan"),
            description=description.strip() if description and description.strip() else None,
            room=room.strip() if room and room.strip() else None,
        )

    def create(
        self,
        *,
        owner_id: int,
        title: str,
        start_time: str,
        end_time: str,
        grace_period_minutes: Optional[int] = None,
        allows_departure_scan: Optional[bool] = False,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> Activity:
        owner = _require_owner(owner_id)
        fields = self._fields(
            title=title,
            start_time=start_time,
            end_time=end_time,
            grace_period_minutes=grace_period_minutes,
            allows_departure_scan=allows_departure_scan,
            description=description,
            room=room,
        )
        activity_id = self._activities.create(owner_id=owner, **fields)
        return Activity(activity_id=activity_id, owner_id=owner, **fields)

    def get_owned(self, activity_id: int, owner_id: int) -> Activity:
        """Activity that belongs to `owner_id`; other owners' activities are reported as missing."""
        owner = _require_owner(owner_id)
        activity = self._activities.get_by_id(int(activity_id))
        if not activity or activity.owner_id != owner:
            raise NotFoundError("Activity not found")
        return activity

    def update(
        self,
        activity_id: int,
        *,
        owner_id: int,
        title: str,
        start_time: str,
        end_time: str,
        grace_period_minutes: Optional[int] = None,
        allows_departure_scan: Optional[bool] = False,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> Activity:
        """Replace the editable fields. Existing attendance records keep their status."""
        current = self.get_owned(activity_id, owner_id)
        fields = self._fields(
            title=title,
            start_time=start_time,
            end_time=end_time,
            grace_period_minutes=grace_period_minutes,
            allows_departure_scan=allows_departure_scan,
            description=description,
            room=room,
        )
        self._activities.update(current.activity_id, **fields)
        logger.info("updated activity %s", current.activity_id)
        return Activity(activity_id=current.activity_id, owner_id=current.owner_id, **fields)

    def delete(self, activity_id: int, *, owner_id: int) -> None:
        activity = self.get_owned(activity_id, owner_id)
        self._activities.delete(activity.activity_id)
        logger.info("deleted activity %s for owner %s", activity.activity_id, activity.owner_id)

    def list_for_owner(self, owner_id: int) -> Sequence[Activity]:
        return self._activities.list_for_owner(int(owner_id))

    @staticmethod
    def to_dict(activity: Activity) -> dict:
        return {
            "activity_id": activity.activity_id,
            "owner_id": activity.owner_id,
            "title": activity.title,
            "description": activity.description,
            "room": activity.room,
            "start_time": activity.start_time.strftime("%H:%M"),
            "end_time": activity.end_time.strftime("%H:%M"),
            "grace_period_minutes": activity.grace_period_minutes,
            "allows_departure_scan": activity.allows_departure_scan,
        }
