"""Shared test fixtures for the market feed client."""

from unittest.mock import AsyncMock

import pytest

from marketfeed.config import (
    AppSettings,
    ExchangeSettings,
    RankingSettings,
    StreamSettings,
)
from marketfeed.exchange.client import ExchangeClient


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            rest_url="https://api.example.test",
            stream_url="wss://stream.example.test:9443",
        ),
        ranking=RankingSettings(),
        stream=StreamSettings(open_timeout=1.0, close_timeout=1.0),
    )


@pytest.fixture
def ranking_settings(mock_settings: AppSettings) -> RankingSettings:
    return mock_settings.ranking


@pytest.fixture
def mock_client() -> AsyncMock:
    """ExchangeClient double; configure return values per test."""
    return AsyncMock(spec=ExchangeClient)
