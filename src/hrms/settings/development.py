import os

from .base import *  # noqa: F401,F403
from .base import JWT_SECRET as _JWT_SECRET

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = _JWT_SECRET or "dev-jwt-secret"

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
