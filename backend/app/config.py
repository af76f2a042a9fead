"""Environment-driven settings for the Flask app."""

import os

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def _origins(raw: str) -> list:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Config:
    CORS_ORIGINS = _origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))

    RATES_URL = os.getenv("RATES_URL", "https://api.exchangerate.host/latest")
    RATES_TIMEOUT_SECONDS = float(os.getenv("RATES_TIMEOUT_SECONDS", 5))
    RATES_CACHE_SECONDS = float(os.getenv("RATES_CACHE_SECONDS", 60 * 60))
    RATES_BASE_CURRENCY = os.getenv("RATES_BASE_CURRENCY", "EUR").upper()

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "DEBUG"
