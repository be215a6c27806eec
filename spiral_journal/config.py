import os

APP_TITLE = "Spiral Journal"
DB_PATH = "data/journal.db"

API_KEY_PREFIX = "sk-ant-"
API_KEY_HELP_URL = "https://console.anthropic.com"

DEFAULT_MOODS = ("Happy", "Content")
AVAILABLE_MOODS = (
    "Happy", "Content", "Unsure", "Sad", "Energetic",
    "Anxious", "Excited", "Frustrated", "Peaceful",
    "Grateful", "Inspired", "Overwhelmed", "Proud",
    "Reflective", "Creative", "Social", "Tired",
)


def firebase_api_key() -> str:
    return os.getenv("FIREBASE_API_KEY") or ""

def firebase_auth_url() -> str:
    return os.getenv("FIREBASE_AUTH_URL") or "https://identitytoolkit.googleapis.com/v1"

def auth_timeout_s() -> float:
    return float(os.getenv("AUTH_TIMEOUT_S") or 30)

def log_level() -> str:
    return (os.getenv("SPIRAL_LOG_LEVEL") or "INFO").upper()
