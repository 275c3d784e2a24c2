import logging
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./vocab.db")
    SECRET_KEY = os.getenv("SECRET_KEY")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    IMAGE_SEARCH_CACHE_SECONDS = int(os.getenv("IMAGE_SEARCH_CACHE_SECONDS", "3600"))

    PEXELS_API_KEY = os.getenv("PEXELS_API_KEY")
    PEXELS_API_URL = os.getenv("PEXELS_API_URL", "https://api.pexels.com/v1")
    TRANSLATION_API_URL = os.getenv("TRANSLATION_API_URL", "http://127.0.0.1:5000/translate")
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

    AUDIO_CLEANUP_ENABLED = _as_bool(os.getenv("AUDIO_CLEANUP_ENABLED", "true"))
    AUDIO_CLEANUP_INTERVAL_SECONDS = int(os.getenv("AUDIO_CLEANUP_INTERVAL_SECONDS", str(24 * 60 * 60)))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


config = Config()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
)
