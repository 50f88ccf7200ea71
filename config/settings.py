"""
POSQ – Django Settings (Infrastructure Only)
=============================================
Django serves as the HTTP container for the POSQ inventory and promo
engines. The engines are framework-free; Django only routes JSON
requests to core/http_api handlers.

No database: every request carries its own catalog snapshot.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("POSQ_SECRET_KEY", "posq-dev-key-replace-before-deployment")

DEBUG = os.environ.get("POSQ_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("POSQ_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
DATABASES = {}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# ── POSQ store rules ──────────────────────────────────────────
# Promo windows are evaluated on this wall clock.
POSQ_STORE_TIMEZONE = os.environ.get("POSQ_STORE_TIMEZONE", "Asia/Jakarta")
# Checkout refuses catalog snapshots older than this.
POSQ_MAX_SNAPSHOT_AGE_SECONDS = int(os.environ.get("POSQ_MAX_SNAPSHOT_AGE_SECONDS", "30"))
POSQ_CURRENCY = os.environ.get("POSQ_CURRENCY", "IDR")
# Per-store overrides: {"store-id": {"timezone": "...", "max_snapshot_age_seconds": 60}}
POSQ_STORE_RULES = {}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "posq": {
            "handlers": ["console"],
            "level": os.environ.get("POSQ_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
