"""
Shared fixtures for report tests.
Frozen, non-random records covering every report section.
"""
from datetime import date, datetime, timezone

import pytest

from defiresearchagent.reports import (
    ErrorRecord,
    MarketSnapshot,
    NewsDigest,
    NewsItem,
    ProjectProfile,
    SocialDigest,
)


# ============================================================================
# RECORD FIXTURES
# ============================================================================

@pytest.fixture
def market_snapshot():
    """Bitcoin market snapshot with every field populated."""
    return MarketSnapshot(
        name="Bitcoin",
        symbol="btc",
        current_price={"usd": 65000.5, "btc": 1.0},
        market_cap={"usd": 1_280_000_000_000},
        market_cap_rank=1,
        price_change_24h_percentage=2.5,
        price_change_7d_percentage=-1.234,
        price_change_30d_percentage=0,
        total_volume=35_400_000_000,
        high_24h=66000,
        low_24h=64000,
        circulating_supply=19_700_000,
        total_supply=21_000_000,
        max_supply=21_000_000,
        ath=73738,
        ath_date="2024-03-14T07:10:36.635Z",
    )


@pytest.fixture
def project_profile():
    """Bitcoin project profile with markup in the description."""
    return ProjectProfile(
        name="Bitcoin",
        symbol="btc",
        description="<p>Bitcoin is the first <a href='https://bitcoin.org'>decentralized</a> cryptocurrency.</p>",
        homepage="https://bitcoin.org",
        blockchain=None,
        categories=["Cryptocurrency", "", "Layer 1 (L1)"],
        genesis_date="2009-01-03",
        sentiment_votes_up_percentage=84.27,
        sentiment_votes_down_percentage=15.73,
        community_data={
            "twitter_followers": 6_500_000,
            "reddit_subscribers": 5_800_000,
            "telegram_channel_user_count": None,
        },
        developer_data={
            "forks": 36_000,
            "stars": 73_000,
            "subscribers": 3_900,
            "pull_request_contributors": 846,
            "commit_count_4_weeks": 108,
        },
        links={
            "blockchain_site": [
                "https://mempool.space/",
                "",
                "https://blockchair.com/bitcoin/",
                "https://btc.com/",
                "https://btc.tokenview.io/",
            ],
            "github_url": ["https://github.com/bitcoin/bitcoin", ""],
            "twitter_screen_name": "bitcoin",
            "facebook_username": "",
            "subreddit_url": "https://www.reddit.com/r/Bitcoin/",
        },
    )


@pytest.fixture
def news_items():
    published = datetime(2024, 5, 3, 12, 0, tzinfo=timezone.utc)
    return [
        NewsItem(
            title="Bitcoin Announces Major Partnership with Tech Giant",
            published_at=published,
            url="https://example.com/news-1",
            source="CryptoNews",
            sentiment_score=0.5,
        ),
        NewsItem(
            title="New Bitcoin Feature Set to Launch Next Month",
            published_at=published,
            url="https://example.com/news-2",
            source="BlockchainToday",
            sentiment_score=0.25,
        ),
        NewsItem(
            title="Bitcoin Foundation Announces Grants Program",
            published_at=published,
            url="https://example.com/news-3",
            source="CryptoDaily",
            sentiment_score=-0.1,
        ),
    ]


@pytest.fixture
def news_digest(news_items):
    """Three articles with a mean score of ~0.217 (Positive)."""
    return NewsDigest.from_items("Bitcoin", "Last 7 days", news_items)


@pytest.fixture
def social_digest():
    """Social digest scored 0.75 (very positive) with one notable mention."""
    return SocialDigest.from_score(
        token="Bitcoin",
        period="Last 7 days",
        sentiment_score=0.75,
        tweet_volume=5234,
        sentiment_breakdown={"positive": 0.65, "neutral": 0.2, "negative": 0.15},
        trending_hashtags=["#Bitcoin", "#BTC"],
        influential_mentions=[
            {
                "username": "crypto_influencer1",
                "followers": 245000,
                "tweet": "Solid tech. #Bitcoin",
                "sentiment": "positive",
            }
        ],
    )


@pytest.fixture
def token_error():
    return ErrorRecord(error="Unable to fetch token information", details="HTTP 404 error: coin not found")


@pytest.fixture
def project_error():
    return ErrorRecord(error="Unable to fetch project information", details="Request failed")


@pytest.fixture
def news_error():
    return ErrorRecord(error="Unable to analyze news", details="boom")


@pytest.fixture
def social_error():
    return ErrorRecord(error="Unable to analyze sentiment", details="boom")


@pytest.fixture
def report_date():
    return date(2024, 1, 5)
