import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables only for local development
if os.path.exists(".env"):
    load_dotenv()
    logger.info("Loading from .env file (local development)")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ------------------------------------------------------------------------------
# STORAGE
# ------------------------------------------------------------------------------

DATA_FILE = os.getenv("DATA_FILE", "data.json")

# Write to a temp file and rename over DATA_FILE instead of rewriting in place
ATOMIC_WRITES = _env_flag("ATOMIC_WRITES")

# ------------------------------------------------------------------------------
# SERVER
# ------------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", 8000))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
