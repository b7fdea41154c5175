import os
import tempfile
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
# Local SQLite file next to the backend by default
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/protocol.db")

# --- Trends ---
TREND_WINDOW_DAYS = int(os.getenv("TREND_WINDOW_DAYS", "7"))

# --- Today entry ---
MOOD_CHOICES = [m.strip() for m in os.getenv("MOOD_CHOICES", "🔥,🌫️,⚡️").split(",") if m.strip()]
DEFAULT_MOOD = os.getenv("DEFAULT_MOOD", MOOD_CHOICES[0] if MOOD_CHOICES else "🔥")

# --- Export ---
EXPORT_DIR = os.getenv("EXPORT_DIR", tempfile.gettempdir())

# --- Data retention ---
DATA_RETENTION_PERIOD = os.getenv("DATA_RETENTION_PERIOD", "Indefinite")
RUN_RETENTION_ON_STARTUP = os.getenv("RUN_RETENTION_ON_STARTUP", "true").lower() in ("1", "true", "yes")

# --- Reminders ---
REMINDER_TITLE = os.getenv("REMINDER_TITLE", "Stay on track!")
REMINDER_BODY = os.getenv("REMINDER_BODY", "Don't forget your habits today 🚀")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
