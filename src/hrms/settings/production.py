import os

from .base import *  # noqa: F401,F403
from .base import JWT_SECRET as _JWT_SECRET

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = _JWT_SECRET or SECRET_KEY

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
