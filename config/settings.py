"""
AgroSync – Django Settings (Infrastructure Only)
=================================================
Django serves as the framework container for the snapshot store.
The ledger itself is plain Python and never imports these settings;
core.config.LedgerSettings.from_django_settings() is the only bridge.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "AGROSYNC_SECRET_KEY", "agrosync-dev-key-replace-before-deployment",
)

DEBUG = os.environ.get("AGROSYNC_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── AgroSync Modules ──────────────────────────────────
    "core.snapshot_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("AGROSYNC_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Farm Ledger ───────────────────────────────────────────────
AGROSYNC_SNAPSHOT_KEY = os.environ.get("AGROSYNC_SNAPSHOT_KEY", "agrosync_farm")
AGROSYNC_ORDER_CODE_PREFIX = os.environ.get("AGROSYNC_ORDER_CODE_PREFIX", "PED-")
AGROSYNC_ORDER_CODE_WIDTH = int(os.environ.get("AGROSYNC_ORDER_CODE_WIDTH", "6"))

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "agrosync": {
            "handlers": ["console"],
            "level": os.environ.get("AGROSYNC_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
