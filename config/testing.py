from .config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = Config.db_config()

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

LOG_LEVEL = "WARNING"
LOG_FILE = None

MAX_IMPORT_BYTES = 1024 * 1024
STREAM_KEEPALIVE_SECONDS = 1.0
