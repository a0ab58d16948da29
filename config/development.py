import os

from config import sqlalchemy_uri

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "meeting_checkin"),
}
SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", sqlalchemy_uri(DB_CONFIG))

KEYCLOAK_ISSUER = os.getenv("KEYCLOAK_ISSUER", "http://localhost:8080/realms/meeting-realm")
KEYCLOAK_REALM = os.getenv("KEYCLOAK_REALM", "meeting-realm")
KEYCLOAK_CLIENT_ID = os.getenv("KEYCLOAK_CLIENT_ID", "meeting-checkin")
KEYCLOAK_CLIENT_SECRET = os.getenv("KEYCLOAK_CLIENT_SECRET", "")

# Generated mailer PDFs are written under MAILER_DIR/<meeting id>/
MAILER_DIR = os.getenv("MAILER_DIR", "generated-pdfs")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
