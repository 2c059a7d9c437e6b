import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
AUDIT_RETENTION_DAYS = int(os.getenv("AUDIT_RETENTION_DAYS", "180"))

COMPANY = {
    "name": os.getenv("COMPANY_NAME", "MNTechs Solutions Pvt Ltd"),
    "address": os.getenv("COMPANY_ADDRESS", "123 Business Street, City, Country"),
    "pan": os.getenv("COMPANY_PAN", "ABCDE1234F"),
    "gstin": os.getenv("COMPANY_GSTIN", "12ABCDE1234F1Z5"),
    "website": os.getenv("COMPANY_WEBSITE", "www.mntechs.com"),
}

# In-process daily run of the recurring jobs; enable on one process only.
# With it off, schedule `flask --app hrms jobs run-due` externally instead.
SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "0")))
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "Asia/Kolkata")
SCHEDULER_HOUR = int(os.getenv("SCHEDULER_HOUR", "0"))
SCHEDULER_MINUTE = int(os.getenv("SCHEDULER_MINUTE", "0"))
