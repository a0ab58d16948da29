import os
import urllib.parse


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unrecognised means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def sqlalchemy_uri(db_config: dict) -> str:
    # Quote the password so characters such as '@' survive the URL.
    password = urllib.parse.quote_plus(str(db_config.get("password", "")))
    return (
        f"mysql+mysqlconnector://{db_config['user']}:{password}"
        f"@{db_config['host']}:{db_config.get('port', 3306)}/{db_config['database']}"
    )
