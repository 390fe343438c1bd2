from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_RATE_PROVIDERS = {"static", "external-http"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    DB_FILENAME, RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Basic app metadata
    app_name: str = "Ledger Currency Service"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "ledgerfx.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Currencies
    base_currency: str = "USD"
    default_currency: str = "USD"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: AnyHttpUrl = "http://localhost:3000"
    exchange_rate_path: str = "/currency/exchange-rate"
    http_timeout_seconds: float = 5.0
    http_retries: int = 2

    # Allowed: 'static' (built-in approximate table), 'external-http' (backend endpoint)
    exchange_rate_provider: str = "static"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.base_currency = self.base_currency.upper()
        self.default_currency = self.default_currency.upper()
        if self.exchange_rate_provider not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {ALLOWED_RATE_PROVIDERS}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")

    @property
    def exchange_rate_url(self) -> str:
        return str(self.exchange_api_base_url).rstrip("/") + self.exchange_rate_path


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
