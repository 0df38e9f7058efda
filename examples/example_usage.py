"""Example: drive the attendance service directly (no Flask).

Controllers are a thin layer; the check-in/check-out logic lives in the service.
"""

import importlib

from gym_checkin.common.datetime_utils import now_utc
from gym_checkin.config import get_settings_module
from gym_checkin.container import build_container
from gym_checkin.database.bootstrap import DEMO_GYM_ID


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    result = container.attendance_service.record_scan("demo-member", DEMO_GYM_ID, now_utc())
    print(result.to_dict())
    print(container.attendance_service.get_history_ui("demo-member", limit=5))


if __name__ == "__main__":
    main()
