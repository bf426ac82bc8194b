import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "kindergarten_test"),
    "isolation_level": "READ COMMITTED",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SCAN_COOLDOWN_SECONDS = 1.0
NOTIFY_TIMEOUT_SECONDS = 2.0

SMTP_HOST = ""
SMTP_PORT = 587
SMTP_USER = ""
SMTP_PASSWORD = ""
SMTP_FROM = "no-reply@kindergarten.local"
SMTP_USE_TLS = False

TWILIO_ACCOUNT_SID = ""
TWILIO_AUTH_TOKEN = ""
TWILIO_PHONE_NUMBER = ""

AUTO_INIT_DB = False
AUTO_SEED_DB = False
