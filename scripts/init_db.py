from __future__ import annotations

import importlib

from dotenv import load_dotenv

from workforce_hub.config import get_settings_module
from workforce_hub.database.bootstrap import apply_schema
from workforce_hub.main import SCHEMA_PATH


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    count = apply_schema(db_config, schema_path=SCHEMA_PATH)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(statements={count})"
    )


if __name__ == "__main__":
    main()
