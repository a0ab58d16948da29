import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "meeting_checkin_test"),
}
SQLALCHEMY_DATABASE_URI = "sqlite://"

KEYCLOAK_ISSUER = "http://keycloak.test/realms/test-realm"
KEYCLOAK_REALM = "test-realm"
KEYCLOAK_CLIENT_ID = "meeting-checkin"
KEYCLOAK_CLIENT_SECRET = "test-client-secret"

MAILER_DIR = os.getenv("MAILER_DIR", "generated-pdfs-test")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
