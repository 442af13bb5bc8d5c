import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_core"),
}

# Raw strings; GraceConfig validates and falls back to defaults
CHECKOUT_GRACE_HOURS = os.getenv("CHECKOUT_GRACE_HOURS")
ADJUST_REQUEST_MAX_DAYS = os.getenv("ADJUST_REQUEST_MAX_DAYS")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
