from __future__ import annotations

from dotenv import load_dotenv

from ems_dashboard.database.bootstrap import DEMO_ADMIN, DEMO_EMPLOYEES, ensure_demo_data
from ems_dashboard.settings import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print(f"  admin:     {DEMO_ADMIN['email']} / {DEMO_ADMIN['password']}")
    for emp in DEMO_EMPLOYEES:
        print(f"  employee:  {emp['email']} / {emp['password']}")


if __name__ == "__main__":
    main()
