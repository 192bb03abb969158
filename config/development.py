import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "church_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Service windows are evaluated in this zone, not the host's.
CHURCH_TIMEZONE = os.getenv("CHURCH_TIMEZONE", "Africa/Nairobi")

# "memory" (single process) or "mysql" (shared across workers)
DEVICE_GUARD_BACKEND = os.getenv("DEVICE_GUARD_BACKEND", "memory")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
