import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_core"),
}

CHECKOUT_GRACE_HOURS = os.getenv("CHECKOUT_GRACE_HOURS")
ADJUST_REQUEST_MAX_DAYS = os.getenv("ADJUST_REQUEST_MAX_DAYS")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
