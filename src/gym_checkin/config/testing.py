import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_checkin_test"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "2")),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

REQUIRE_ACTIVE_GYM = False
HISTORY_LIMIT = 50

AUTO_INIT_DB = False
AUTO_SEED_DB = False
