"""Configuration settings for the upload server."""

import os
from datetime import timedelta

from common.constants import CHUNK_SIZE_BYTES, MAX_EXPIRY_DAYS, SESSION_TIMEOUT_SECONDS


DATA_DIR = os.environ.get("CHUNKPOST_DATA_DIR", "/app/data/files")

DATABASE_PATH = os.environ.get("CHUNKPOST_DATABASE_PATH", "/app/data/chunkpost.db")

SERVER_HOST = os.environ.get("CHUNKPOST_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("CHUNKPOST_PORT", "8000"))

CHUNK_SIZE = int(os.environ.get("CHUNKPOST_CHUNK_SIZE", str(CHUNK_SIZE_BYTES)))

# Seconds a pending upload may stay idle between exchanges before it is discarded
SESSION_TIMEOUT = int(os.environ.get("CHUNKPOST_SESSION_TIMEOUT", str(SESSION_TIMEOUT_SECONDS)))

REAPER_INTERVAL = int(os.environ.get("CHUNKPOST_REAPER_INTERVAL", "10"))

MAX_EXPIRY = timedelta(days=MAX_EXPIRY_DAYS)
