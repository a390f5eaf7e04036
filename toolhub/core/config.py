from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolhub.models.constants import ANCHOR_CURRENCY, SUPPORTED_CURRENCIES


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, PORT,
    EXCHANGE_API_URL, RATES_REFRESH_INTERVAL_SECONDS, SUPPORTED_CURRENCIES as a JSON list).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Toolhub API"
    debug: bool = False
    version: str = "0.1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Exchange rates: remote provider returns USD based rates
    exchange_api_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest/USD"
    http_timeout_seconds: float = 10.0

    # Refresh cycle
    rates_retry_attempts: int = 3
    rates_retry_base_delay_seconds: float = 1.0
    rates_refresh_interval_seconds: float = 1800.0  # 30 minutes

    supported_currencies: List[str] = list(SUPPORTED_CURRENCIES)

    def init_post_load(self) -> None:
        """Normalize derived fields and validate numeric knobs."""
        codes = []
        for code in self.supported_currencies:
            code = code.strip().upper()
            if code and code not in codes:
                codes.append(code)
        # The matrix is anchored on USD; it must always be part of the set
        if ANCHOR_CURRENCY not in codes:
            codes.insert(0, ANCHOR_CURRENCY)
        self.supported_currencies = codes

        if self.rates_retry_attempts < 1:
            raise ValueError("rates_retry_attempts must be at least 1")
        for name in (
            "http_timeout_seconds",
            "rates_refresh_interval_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.rates_retry_base_delay_seconds < 0:
            raise ValueError("rates_retry_base_delay_seconds cannot be negative")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
