import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

PUBLIC_BASE_URL = "http://testserver"

LATE_THRESHOLD_MINUTES = 15
ENFORCE_TIME_WINDOW = True
MATCH_DUPLICATE_BY_NAME = False

# TrueType font for PDF reports (non-Latin names); empty = look for DejaVuSans
PDF_FONT_PATH = os.getenv("PDF_FONT_PATH") or None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
