import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = Config.db_config()

DEBUG = False

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = False

LOG_LEVEL = Config.LOG_LEVEL
LOG_FILE = os.getenv("LOG_FILE", "roster.log")

MAX_IMPORT_BYTES = Config.MAX_IMPORT_BYTES
STREAM_KEEPALIVE_SECONDS = Config.STREAM_KEEPALIVE_SECONDS
