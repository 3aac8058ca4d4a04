from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from phillygpt.core.normalizer import NormalizeOptions
from phillygpt.core.prompt import SYSTEM_PROMPT


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.3"))
        self.top_p: float = float(os.getenv("MODEL_TOP_P", "0.9"))
        self.max_output_tokens: int = int(os.getenv("MODEL_MAX_OUTPUT_TOKENS", "650"))
        self.model_timeout: float = float(os.getenv("MODEL_TIMEOUT", "30"))

        self.max_turns: int = int(os.getenv("CHAT_MAX_TURNS", "20"))
        self.max_chars_per_turn: int = int(os.getenv("CHAT_MAX_CHARS_PER_TURN", "2000"))

        self.weather_api_url: str = os.getenv(
            "WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast"
        )
        self.weather_latitude: float = float(os.getenv("WEATHER_LATITUDE", "39.9526"))
        self.weather_longitude: float = float(os.getenv("WEATHER_LONGITUDE", "-75.1652"))
        self.weather_timezone: str = os.getenv("WEATHER_TIMEZONE", "America/New_York")
        self.weather_timeout: float = float(os.getenv("WEATHER_TIMEOUT", "10"))

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}

    def normalize_options(self) -> NormalizeOptions:
        return NormalizeOptions(
            max_turns=self.max_turns,
            max_chars_per_turn=self.max_chars_per_turn,
            system_instructions=SYSTEM_PROMPT,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
