"""
Shared fixtures and configuration for toolkit tests.
This file provides common fixtures, mocks and provider payloads used across all toolkit tests.
"""
import random
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest


# ============================================================================
# SHARED MOCKS AND PATCHES
# ============================================================================

@pytest.fixture(autouse=True)
def mock_logger():
    """Auto-use fixture to mock logger across all toolkit tests."""
    with patch('defiresearchagent.toolkits.base.base_source.logger') as mock_base_log, \
         patch('defiresearchagent.toolkits.utils.http_client.logger') as mock_http_log, \
         patch('defiresearchagent.toolkits.data.coingecko_source.logger') as mock_coingecko_log:
        yield {
            'base': mock_base_log,
            'http': mock_http_log,
            'coingecko': mock_coingecko_log,
        }


@pytest.fixture
def mock_httpx_client():
    """Mock httpx.AsyncClient for HTTP testing."""
    mock_client = AsyncMock()
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.json.return_value = {"id": "bitcoin"}
    mock_response.text = '{"id": "bitcoin"}'
    mock_response.raise_for_status = Mock()

    mock_client.request.return_value = mock_response
    mock_client.aclose = AsyncMock()

    return mock_client


# ============================================================================
# DETERMINISM HELPERS
# ============================================================================

@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


# ============================================================================
# COINGECKO PAYLOADS
# ============================================================================

@pytest.fixture
def coingecko_market_payload():
    """Trimmed /coins/bitcoin response with market_data=true."""
    return {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "market_cap_rank": 1,
        "market_data": {
            "current_price": {"usd": 65000.5, "btc": 1.0, "eur": 60000},
            "market_cap": {"usd": 1280000000000, "btc": 19700000},
            "market_cap_rank": 1,
            "total_volume": {"usd": 35400000000},
            "high_24h": {"usd": 66000},
            "low_24h": {"usd": 64000},
            "price_change_percentage_24h": 2.5,
            "price_change_percentage_7d": -1.234,
            "price_change_percentage_30d": 10.1,
            "circulating_supply": 19700000.0,
            "total_supply": 21000000.0,
            "max_supply": 21000000.0,
            "ath": {"usd": 73738},
            "ath_date": {"usd": "2024-03-14T07:10:36.635Z"},
        },
    }


@pytest.fixture
def coingecko_project_payload():
    """Trimmed /coins/bitcoin response with community_data and developer_data."""
    return {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "asset_platform_id": None,
        "categories": ["Cryptocurrency", None, "Layer 1 (L1)"],
        "description": {"en": "Bitcoin is the first <a href=\"https://bitcoin.org\">decentralized</a> cryptocurrency."},
        "genesis_date": "2009-01-03",
        "sentiment_votes_up_percentage": 84.27,
        "sentiment_votes_down_percentage": 15.73,
        "links": {
            "homepage": ["", "https://bitcoin.org", ""],
            "blockchain_site": ["https://mempool.space/", "", "https://blockchair.com/bitcoin/"],
            "official_forum_url": ["https://bitcointalk.org/", ""],
            "chat_url": [""],
            "announcement_url": ["", ""],
            "twitter_screen_name": "bitcoin",
            "facebook_username": "bitcoins",
            "subreddit_url": "https://www.reddit.com/r/Bitcoin/",
            "repos_url": {"github": ["https://github.com/bitcoin/bitcoin", ""], "bitbucket": []},
        },
        "community_data": {
            "twitter_followers": 6500000,
            "reddit_subscribers": 5800000,
            "telegram_channel_user_count": None,
        },
        "developer_data": {
            "forks": 36000,
            "stars": 73000,
            "subscribers": 3900,
            "total_issues": 7700,
            "closed_issues": 7400,
            "pull_requests_merged": 11000,
            "pull_request_contributors": 846,
            "commit_count_4_weeks": 108,
        },
    }
