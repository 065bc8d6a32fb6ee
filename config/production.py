import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

FINAL_CONFIRMATION_ROLE = os.getenv("FINAL_CONFIRMATION_ROLE", "hr")
CLAIM_APPROVER_ROLES = os.getenv("CLAIM_APPROVER_ROLES", "admin,hr,operation_manager,site_manager")

REPORT_FETCH_WORKERS = int(os.getenv("REPORT_FETCH_WORKERS", "4"))
MAX_REPORT_DAYS = int(os.getenv("MAX_REPORT_DAYS", "366"))
