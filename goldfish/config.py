"""
Environment configuration.

All settings come from environment variables with development defaults:

    GOLDFISH_ENV         development | production
    GOLDFISH_STORE_DIR   directory for JSON session files (unset: in-memory)
    GOLDFISH_LOG_LEVEL   logging level name
    GOLDFISH_HOST        bind address for `goldfish serve`
    GOLDFISH_PORT        bind port for `goldfish serve`
    GOLDFISH_SEED        fixed seed for shuffles and ids (unset: random)
    ALLOWED_ORIGINS      comma-separated CORS origins
"""

import os

GOLDFISH_ENV = os.getenv("GOLDFISH_ENV", "development")
GOLDFISH_STORE_DIR = os.getenv("GOLDFISH_STORE_DIR", None)
GOLDFISH_LOG_LEVEL = os.getenv("GOLDFISH_LOG_LEVEL", "INFO").upper()
GOLDFISH_HOST = os.getenv("GOLDFISH_HOST", "127.0.0.1")
GOLDFISH_PORT = int(os.getenv("GOLDFISH_PORT", "8000"))
GOLDFISH_SEED = os.getenv("GOLDFISH_SEED", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "v1"
SERVICE_NAME = "goldfish-engine"
