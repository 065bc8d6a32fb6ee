import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Role that gives the final yes/no on every leave request and grants comp-off.
FINAL_CONFIRMATION_ROLE = os.getenv("FINAL_CONFIRMATION_ROLE", "hr")

# Comma-separated roles allowed to decide extra-work (OT / comp-off) claims.
CLAIM_APPROVER_ROLES = os.getenv("CLAIM_APPROVER_ROLES", "admin,hr,operation_manager,site_manager")

REPORT_FETCH_WORKERS = int(os.getenv("REPORT_FETCH_WORKERS", "4"))
MAX_REPORT_DAYS = int(os.getenv("MAX_REPORT_DAYS", "366"))
