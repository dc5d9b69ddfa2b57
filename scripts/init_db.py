from __future__ import annotations

from dotenv import load_dotenv

from ems_dashboard.database.bootstrap import SCHEMA_PATH, apply_schema, list_tables
from ems_dashboard.settings import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
