import importlib
import os


def get_settings_module() -> str:
    # Environment from APP_ENV, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "ems_dashboard.settings.production"

    if env in {"test", "testing"}:
        return "ems_dashboard.settings.testing"

    return "ems_dashboard.settings.development"


def load_settings():
    return importlib.import_module(get_settings_module())
