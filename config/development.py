import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

# Base of the link encoded in session QR codes
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

# Marks more than this many minutes after the start are late
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "15"))
# 0 = accept marks whenever the session is active, ignoring start/end times
ENFORCE_TIME_WINDOW = bool(int(os.getenv("ENFORCE_TIME_WINDOW", "1")))
# 1 = also reject a second mark with the same student name
MATCH_DUPLICATE_BY_NAME = bool(int(os.getenv("MATCH_DUPLICATE_BY_NAME", "0")))

# TrueType font for PDF reports (non-Latin names); empty = look for DejaVuSans
PDF_FONT_PATH = os.getenv("PDF_FONT_PATH") or None

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
