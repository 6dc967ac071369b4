import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./braida.db")

# Public base URL used to build share links ({APP_URL}/shared-booking/{token})
APP_URL = os.getenv("APP_URL", "https://braida.uk")

# Platform pricing settings - rates are fractions, minimums are in pence
PLATFORM_FEE_RATE = os.getenv("PLATFORM_FEE_RATE", "0.15")
PROCESSING_FEE_RATE = os.getenv("PROCESSING_FEE_RATE", "0.029")
MINIMUM_PLATFORM_FEE_PENCE = int(os.getenv("MINIMUM_PLATFORM_FEE_PENCE", "100"))
MINIMUM_PROCESSING_FEE_PENCE = int(os.getenv("MINIMUM_PROCESSING_FEE_PENCE", "30"))

# Booking share links
SHARE_DEFAULT_TTL_HOURS = int(os.getenv("SHARE_DEFAULT_TTL_HOURS", "48"))
SHARE_MIN_TTL_HOURS = int(os.getenv("SHARE_MIN_TTL_HOURS", "1"))
SHARE_MAX_TTL_HOURS = int(os.getenv("SHARE_MAX_TTL_HOURS", "720"))  # 30 days
# Anonymous share lookups per IP, to slow down token guessing
SHARE_RESOLVE_RATE_LIMIT = int(os.getenv("SHARE_RESOLVE_RATE_LIMIT", "60"))
SHARE_RESOLVE_RATE_WINDOW_SECONDS = int(os.getenv("SHARE_RESOLVE_RATE_WINDOW_SECONDS", "60"))
# Appointment dates/times on shared links are shown in this zone
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Europe/London")

# HTTP layer
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "https://braida.uk,https://www.braida.uk,http://localhost:5173,http://localhost:3000",
).split(",")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
