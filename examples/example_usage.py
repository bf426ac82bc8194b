"""Example: drive the attendance service layer directly (no Flask).

Controllers are a thin layer; the state machine lives in the services.
Needs a seeded database (scripts/init_db.py + scripts/seed_db.py).
"""

import importlib

from kindergarten.common.logging_setup import configure_logging
from kindergarten.config import get_settings_module
from kindergarten.container import build_container


def main():
    configure_logging("INFO")
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)

    staff_user_id = 2  # "Sara Staff" from the demo seed
    result = container.attendance_service.process_scan("KG-DEMO-0002", staff_user_id)
    print(result.to_dict())
    print(container.report_service.summary("week").to_dict()["present_children"])


if __name__ == "__main__":
    main()
