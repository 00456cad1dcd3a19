import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY

DB_CONFIG = Config.db_config()

DEBUG = bool(int(os.getenv("DEBUG", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo attendees on startup
AUTO_SEED_DB = Config.AUTO_SEED_DB

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = Config.LOG_FILE

MAX_IMPORT_BYTES = Config.MAX_IMPORT_BYTES
STREAM_KEEPALIVE_SECONDS = Config.STREAM_KEEPALIVE_SECONDS
