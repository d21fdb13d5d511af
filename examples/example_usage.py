"""Example: use the service layer without Flask.

Controllers stay thin; the scheduling rules live in the services.
"""

import importlib

from config import get_settings_module

from src.shift_scheduler.shift_scheduler.common.datetime_utils import now_local
from src.shift_scheduler.shift_scheduler.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)
    today = now_local()

    for user in container.user_service.list_staff():
        view = container.calendar_service.management_calendar(year=today.year, month=today.month, user_id=user.user_id)
        for week in view["weekly_totals"]:
            print(user.name, week["label"], week["pending_label"], week["approved_label"])


if __name__ == "__main__":
    main()
