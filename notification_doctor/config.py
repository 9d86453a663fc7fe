# notification_doctor/config.py
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        # valor inválido: se usa el default
        return default


# ====== env ======
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
FIREBASE_ID_TOKEN = os.getenv("FIREBASE_ID_TOKEN")
VERIFY_ID_TOKEN = _env_bool("VERIFY_ID_TOKEN", True)

NOTIFICATIONS_COLLECTION = os.getenv("NOTIFICATIONS_COLLECTION", "notifications")

# cuánto tiempo se deja vivo el listener en la corrida completa
LISTEN_WINDOW_SECONDS = _env_float("LISTEN_WINDOW_SECONDS", 5.0)
