"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Binance public endpoint settings."""

    model_config = SettingsConfigDict(env_prefix="BINANCE_")

    rest_url: str = "https://api.binance.com"
    stream_url: str = "wss://stream.binance.com:9443"
    timeout_ms: int = Field(default=10000, gt=0)  # ccxt request timeout
    enable_rate_limit: bool = True


class RankingSettings(BaseSettings):
    """Catalog ranking and single-symbol lookup parameters."""

    model_config = SettingsConfigDict(env_prefix="RANKING_")

    default_limit: int = Field(default=300, ge=0)
    quote_asset: str = "USDT"
    # Leveraged-token products (BTCUP, BTCDOWN, ...)
    excluded_substrings: list[str] = ["DOWN", "UP"]
    icon_url_template: str = "https://cryptologos.cc/logos/{symbol}-logo.png"
    # Binance accepts 5, 10, 20, 50, 100, 500, 1000, 5000
    order_book_depth: int = Field(default=20, gt=0, le=5000)


class StreamSettings(BaseSettings):
    """Combined-stream websocket connection parameters."""

    model_config = SettingsConfigDict(env_prefix="STREAM_")

    open_timeout: float = Field(default=10.0, gt=0)
    ping_interval: float = Field(default=20.0, gt=0)
    close_timeout: float = Field(default=5.0, gt=0)


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    watch_top: int = Field(default=10, ge=1)  # symbols streamed by the entry point
    exchange: ExchangeSettings = ExchangeSettings()
    ranking: RankingSettings = RankingSettings()
    stream: StreamSettings = StreamSettings()
