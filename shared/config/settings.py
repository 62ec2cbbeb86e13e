import os
import warnings
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


APP_NAME = os.getenv("APP_NAME", "energise-backend")
APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"

PORT = int(os.getenv("PORT", "5000"))

# Comma separated; the frontend is served by a separate static dev server
FRONTEND_ORIGINS = [
    origin.strip()
    for origin in os.getenv("FRONTEND_ORIGIN", "http://127.0.0.1:5500").split(",")
    if origin.strip()
]

# Optional. Absent means caching is disabled, not an error.
REDIS_URL = os.getenv("REDIS_URL") or None

STATIC_DIR = os.getenv("STATIC_DIR") or None

RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT") or None

# --- AUTH ---
# Required; enforced by shared/security/tokens.py
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or None
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

INTERNAL_API_KEY = os.getenv("INTERNAL_API_KEY", "")
if not INTERNAL_API_KEY:
    warnings.warn(
        "INTERNAL_API_KEY is not set. Using an insecure default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    INTERNAL_API_KEY = "insecure-default-change-me"
