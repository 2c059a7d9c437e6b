import os

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/tmp/hrms-test-uploads")

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
SCHEDULER_ENABLED = False
