"""
Normalized record types exchanged between the source adapters and the report composer.

Every record is an immutable Pydantic model. Optional fields are explicitly
``None`` when the provider did not supply them, so the composer can apply the
``N/A`` policy without digging through raw payloads. Validators take care of
the normalization rules shared by all adapters (upper-case symbols, empty
entries dropped from link lists, empty strings treated as absent).
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .sentiment import (
    NewsSentiment,
    SocialSentiment,
    classify_news_sentiment,
    classify_social_sentiment,
    mean_sentiment,
)

__all__ = [
    "ErrorRecord",
    "CurrencyQuote",
    "MarketSnapshot",
    "CommunityMetrics",
    "DeveloperMetrics",
    "ProjectLinks",
    "ProjectProfile",
    "NewsItem",
    "NewsDigest",
    "SentimentBreakdown",
    "InfluentialMention",
    "SocialDigest",
    "is_error",
]


def _drop_empty(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [item for item in value if item]


def _empty_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Record(BaseModel):
    """Base for all normalized records."""
    model_config = ConfigDict(frozen=True, extra="ignore")


class ErrorRecord(Record):
    """Tagged failure produced by an adapter instead of a record."""
    error: str
    details: str = ""

    @classmethod
    def from_exception(cls, summary: str, exc: BaseException) -> "ErrorRecord":
        return cls(error=summary, details=str(exc) or exc.__class__.__name__)


def is_error(value: Any) -> bool:
    """True when ``value`` is an :class:`ErrorRecord`."""
    return isinstance(value, ErrorRecord)


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

class CurrencyQuote(Record):
    usd: Optional[float] = None
    btc: Optional[float] = None


class MarketSnapshot(Record):
    """Point-in-time market statistics for one asset."""
    name: str
    symbol: str
    current_price: CurrencyQuote = Field(default_factory=CurrencyQuote)
    market_cap: CurrencyQuote = Field(default_factory=CurrencyQuote)
    market_cap_rank: Optional[int] = None
    price_change_24h_percentage: Optional[float] = None
    price_change_7d_percentage: Optional[float] = None
    price_change_30d_percentage: Optional[float] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None
    ath: Optional[float] = None
    ath_date: Optional[datetime] = None

    @field_validator("symbol", mode="before")
    @classmethod
    def upper_symbol(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("current_price", "market_cap", mode="before")
    @classmethod
    def default_quote(cls, v):
        return {} if v is None else v


# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

class CommunityMetrics(Record):
    twitter_followers: Optional[int] = None
    reddit_subscribers: Optional[int] = None
    telegram_channel_user_count: Optional[int] = None


class DeveloperMetrics(Record):
    forks: Optional[int] = None
    stars: Optional[int] = None
    subscribers: Optional[int] = None
    total_issues: Optional[int] = None
    closed_issues: Optional[int] = None
    pull_requests_merged: Optional[int] = None
    pull_request_contributors: Optional[int] = None
    commit_count_4_weeks: Optional[int] = None


class ProjectLinks(Record):
    blockchain_site: List[str] = Field(default_factory=list)
    official_forum_url: List[str] = Field(default_factory=list)
    chat_url: List[str] = Field(default_factory=list)
    announcement_url: List[str] = Field(default_factory=list)
    github_url: List[str] = Field(default_factory=list)
    twitter_screen_name: Optional[str] = None
    facebook_username: Optional[str] = None
    subreddit_url: Optional[str] = None

    @field_validator(
        "blockchain_site", "official_forum_url", "chat_url", "announcement_url", "github_url",
        mode="before",
    )
    @classmethod
    def filter_empty_links(cls, v):
        return _drop_empty(v)

    @field_validator("twitter_screen_name", "facebook_username", "subreddit_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _empty_to_none(v)


class ProjectProfile(Record):
    """Descriptive metadata, community and developer metrics for one project."""
    name: str
    symbol: str
    description: Optional[str] = None
    homepage: Optional[str] = None
    blockchain: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    genesis_date: Optional[str] = None
    sentiment_votes_up_percentage: Optional[float] = None
    sentiment_votes_down_percentage: Optional[float] = None
    community_data: CommunityMetrics = Field(default_factory=CommunityMetrics)
    developer_data: DeveloperMetrics = Field(default_factory=DeveloperMetrics)
    links: ProjectLinks = Field(default_factory=ProjectLinks)

    @field_validator("symbol", mode="before")
    @classmethod
    def upper_symbol(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("categories", mode="before")
    @classmethod
    def filter_categories(cls, v):
        return _drop_empty(v)

    @field_validator("description", "homepage", "blockchain", "genesis_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _empty_to_none(v)

    @field_validator("community_data", "developer_data", "links", mode="before")
    @classmethod
    def default_sub_record(cls, v):
        return {} if v is None else v


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------

class NewsItem(Record):
    title: str
    published_at: datetime
    url: str
    source: str
    sentiment_score: float = Field(ge=-1.0, le=1.0)


class NewsDigest(Record):
    """Recent articles about a token plus their aggregate sentiment."""
    token: str
    period: str
    news: List[NewsItem] = Field(default_factory=list)
    news_count: int = 0
    average_sentiment_score: float = Field(default=0.0, ge=-1.0, le=1.0)
    overall_sentiment: NewsSentiment = NewsSentiment.NEUTRAL

    @classmethod
    def from_items(cls, token: str, period: str, items: Sequence[NewsItem]) -> "NewsDigest":
        """Build a digest, deriving the mean score and label from ``items``.

        The label is classified on the exact mean; the stored aggregate is the
        mean rounded to two decimals.
        """
        mean = mean_sentiment(item.sentiment_score for item in items)
        return cls(
            token=token,
            period=period,
            news=list(items),
            news_count=len(items),
            average_sentiment_score=round(mean, 2),
            overall_sentiment=classify_news_sentiment(mean),
        )


# ---------------------------------------------------------------------------
# Social
# ---------------------------------------------------------------------------

class SentimentBreakdown(Record):
    """Positive / neutral / negative fractions; they need not sum to 1."""
    positive: Optional[float] = None
    neutral: Optional[float] = None
    negative: Optional[float] = None


class InfluentialMention(Record):
    username: str
    followers: Optional[int] = None
    tweet: str
    sentiment: Optional[str] = None


class SocialDigest(Record):
    """Aggregate social-media sentiment for a token."""
    token: str
    period: str
    sentiment_score: float = Field(ge=0.0, le=1.0)
    overall_sentiment: SocialSentiment
    tweet_volume: Optional[int] = None
    sentiment_breakdown: SentimentBreakdown = Field(default_factory=SentimentBreakdown)
    trending_hashtags: List[str] = Field(default_factory=list)
    influential_mentions: List[InfluentialMention] = Field(default_factory=list)

    @field_validator("trending_hashtags", mode="before")
    @classmethod
    def filter_hashtags(cls, v):
        return _drop_empty(v)

    @field_validator("sentiment_breakdown", mode="before")
    @classmethod
    def default_breakdown(cls, v):
        return {} if v is None else v

    @classmethod
    def from_score(
        cls,
        token: str,
        period: str,
        sentiment_score: float,
        tweet_volume: Optional[int] = None,
        sentiment_breakdown: Union[SentimentBreakdown, dict, None] = None,
        trending_hashtags: Optional[Sequence[str]] = None,
        influential_mentions: Optional[Sequence[Union[InfluentialMention, dict]]] = None,
    ) -> "SocialDigest":
        """Build a digest whose label is derived from ``sentiment_score``."""
        return cls(
            token=token,
            period=period,
            sentiment_score=sentiment_score,
            overall_sentiment=classify_social_sentiment(sentiment_score),
            tweet_volume=tweet_volume,
            sentiment_breakdown=sentiment_breakdown,
            trending_hashtags=list(trending_hashtags or []),
            influential_mentions=list(influential_mentions or []),
        )
