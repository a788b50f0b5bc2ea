# backend/config.py
from functools import lru_cache
from pathlib import Path
import os
from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

# Load in ascending precedence; later overrides earlier
load_dotenv(ROOT / ".env")
load_dotenv(ROOT / ".env.local", override=True)
load_dotenv(ROOT / "backend" / ".env", override=True)
load_dotenv(ROOT / "backend" / ".env.local", override=True)

class Settings:
    def __init__(self):
        # Server
        self.PORT: int = int(os.getenv("PORT", "3000"))
        self.API_PREFIX: str = os.getenv("API_PREFIX", "/api").rstrip("/")
        self.APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")

        # CORS
        self.ALLOWED_ORIGINS: list[str] = [
            s.strip() for s in os.getenv("ALLOWED_ORIGINS", "*").split(",") if s.strip()
        ]

        # Marketplace (static config record)
        self.FREE_JOBS_LIMIT: int = int(os.getenv("FREE_JOBS_LIMIT", "3"))
        self.PREMIUM_PRICE: int = int(os.getenv("PREMIUM_PRICE", "20"))
        self.MAX_DISTANCE_KM: int = int(os.getenv("MAX_DISTANCE_KM", "10"))

        # Earnings fallback when a job amount carries no digits
        self.DEFAULT_EARNINGS: int = int(os.getenv("DEFAULT_EARNINGS", "500"))

@lru_cache
def get_settings() -> Settings:
    return Settings()
