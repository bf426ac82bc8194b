from __future__ import annotations

import importlib
import logging

from kindergarten.common.logging_setup import configure_logging
from kindergarten.config import get_settings_module
from kindergarten.database.bootstrap import ensure_demo_data

logger = logging.getLogger("seed_db")


def main() -> None:
    configure_logging("INFO")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)
    logger.info(
        "Seeded database -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
