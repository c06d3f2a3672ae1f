"""Static configuration for notam-pager.

All settings come from environment variables, optionally loaded from a
`.env` file at the project root so secrets stay out of the repo.
"""

import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv(os.path.join(PROJECT_ROOT, ".env"))


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


# Airport / location code to watch (Monmouth Executive Airport by default).
AIRPORT_CODE = _env_str("AIRPORT_CODE", "KBLM").upper()

# Poll interval is configured in milliseconds.
POLL_INTERVAL_MS = _env_int("POLL_INTERVAL", 300000)
if POLL_INTERVAL_MS <= 0:
    raise RuntimeError(f"POLL_INTERVAL must be a positive number of milliseconds, got {POLL_INTERVAL_MS}")
POLL_INTERVAL_SECONDS = POLL_INTERVAL_MS / 1000

# Delivery destination (pager number or chat id). PAGER_PHONE_NUMBER is the
# older name and is still accepted.
PAGER_DESTINATION = _env_str("PAGER_DESTINATION") or _env_str("PAGER_PHONE_NUMBER")

# Re-send the latest NOTAM once at startup to verify the delivery path.
STARTUP_PROBE = _env_bool("STARTUP_PROBE", False)

# Seen-set persistence.
STATE_FILE = _resolve_path(_env_str("STATE_FILE", "notam-state.json"))
SEEN_CAP = _env_int("SEEN_CAP", 1000)

# Pause between consecutive deliveries, in seconds.
MESSAGE_DELAY_SECONDS = _env_float("MESSAGE_DELAY", 2.0)

# What to do with notices that only got a random fallback id: "deliver" or "skip".
UNSTABLE_ID_POLICY = _env_str("UNSTABLE_ID_POLICY", "deliver").lower()

# HTTP control surface.
HOST = _env_str("HOST", "0.0.0.0")
PORT = _env_int("PORT", 3000)

# Upstream source selection: "faa_nms" or "file".
NOTAM_SOURCE = _env_str("NOTAM_SOURCE", "faa_nms").lower()
FAA_NMS_API_URL = _env_str("FAA_NMS_API_URL")
FAA_NMS_API_KEY = _env_str("FAA_NMS_API_KEY")
FAA_NMS_API_KEY_HEADER = _env_str("FAA_NMS_API_KEY_HEADER", "x-api-key")
FAA_NMS_TIMEOUT_SECONDS = _env_int("FAA_NMS_TIMEOUT", 15000) / 1000
FAA_NMS_MAX_RESULTS = _env_int("FAA_NMS_MAX_RESULTS", 200)
FAA_NMS_RETRIES = _env_int("FAA_NMS_RETRIES", 2)
NOTAM_FILE = _env_str("NOTAM_FILE")

# Delivery method switches adapters without changing core logic:
# "pager" or "telegram_bot".
DELIVERY_METHOD = _env_str("DELIVERY_METHOD", "pager").lower()
PAGER_API_URL = _env_str("PAGER_API_URL")
PAGER_API_KEY = _env_str("PAGER_API_KEY")
PAGER_MAX_CHARS = _env_int("PAGER_MAX_CHARS", 240)
PAGER_TIMEOUT_SECONDS = _env_int("PAGER_TIMEOUT", 10000) / 1000
# Bot token is only required when DELIVERY_METHOD=telegram_bot.
BOT_API = _env_str("BOT_API")

# Logging configuration.
LOGGING = {
    "level": _env_str("LOG_LEVEL", "INFO"),
    "console": _env_bool("LOG_CONSOLE", True),
    "file": {
        "path": _env_str("LOG_FILE"),
        "max_bytes": _env_int("LOG_FILE_MAX_BYTES", 5 * 1024 * 1024),
        "backup_count": _env_int("LOG_FILE_BACKUP_COUNT", 5),
    },
    # Values of these env vars are masked in every log line.
    "redact": [
        name.strip()
        for name in _env_str("LOG_REDACT", "PAGER_API_KEY,FAA_NMS_API_KEY,BOT_API").split(",")
        if name.strip()
    ],
}
