"""Example: use the domain store directly (without Flask).

Controllers are a thin layer; the synchronization logic lives in EMSStore.
"""

from ems_dashboard.container import build_container
from ems_dashboard.settings import load_settings


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG)
    store = container.ems_store
    store.load_all()

    for employee in store.employees:
        print(employee.name, store.get_attendance_stats(employee.id, container.report_service.current_month()))


if __name__ == "__main__":
    main()
