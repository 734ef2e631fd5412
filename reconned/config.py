"""Runtime settings, read from the environment (and a local .env file)."""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

_log = logging.getLogger(__name__)

DEFAULT_AUTH_TOKEN = "secret_token"

FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "15"))
MAX_CONCURRENT_FETCHES = int(os.getenv("MAX_CONCURRENT_FETCHES", "10"))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_auth_token() -> str:
    """Return the expected API token, read on every call so it can be rotated."""
    token = os.getenv("AUTH_TOKEN")
    if not token:
        _log.warning("AUTH_TOKEN environment variable not set, using default value")
        return DEFAULT_AUTH_TOKEN
    return token
