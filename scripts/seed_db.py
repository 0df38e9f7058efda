from __future__ import annotations

import importlib

from dotenv import load_dotenv

from gym_checkin.config import get_settings_module
from gym_checkin.database.bootstrap import DEMO_GYM_ID, ensure_demo_gym


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_gym(db_config)

    print(
        f"OK: Seeded gym {DEMO_GYM_ID!r} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
