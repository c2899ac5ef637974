from __future__ import annotations
from .coingecko_source import (
    CoinGeckoSource,
    normalize_market_snapshot,
    normalize_project_profile,
)
from .news_source import NewsSource, SimulatedNewsSource
from .social_source import SocialSource, SimulatedSocialSource

__all__ = [
    "CoinGeckoSource",
    "normalize_market_snapshot",
    "normalize_project_profile",
    "NewsSource",
    "SimulatedNewsSource",
    "SocialSource",
    "SimulatedSocialSource",
]
