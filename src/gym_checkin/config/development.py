import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_checkin"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Reject check-in at gyms missing from the gyms table or marked inactive.
REQUIRE_ACTIVE_GYM = bool(int(os.getenv("REQUIRE_ACTIVE_GYM", "0")))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed a demo gym on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
