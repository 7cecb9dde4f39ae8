"""Example: drive the service layer directly (no Flask).

Registers a participant, issues a signed QR payload and submits it twice
against an activity: the first scan records the arrival, the second the
departure (or reports "already scanned in" when departures are disabled).
"""

import importlib

from config import get_settings_module

from src.qr_attendance.qr_attendance.attendance.outcomes import describe
from src.qr_attendance.qr_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    activity = container.activity_service.create(
        owner_id=1, title="Morning lecture", start_time="09:00", end_time="11:00", allows_departure_scan=True
    )
    participant = container.participant_service.register(
        external_id="S-0001", first_name="Ada", last_name="Lovelace", section="A", owner_id=1
    )
    qr_data = container.participant_service.issue_qr(participant.participant_id)

    for _ in range(2):
        outcome = container.attendance_service.submit_scan(qr_data, activity.activity_id)
        print(describe(outcome))

    enrolled = container.participant_service.list_for_owner(1)
    print(f"{len(enrolled)} participant(s) enrolled with owner 1")


if __name__ == "__main__":
    main()
