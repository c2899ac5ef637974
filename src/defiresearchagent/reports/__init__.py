"""
Report generation core.

- models: normalized records produced by the source adapters
- sentiment: news / social sentiment classifiers
- formatting: number, percentage and text helpers
- composer: assembles the Markdown research report
"""

from .models import (
    ErrorRecord,
    CurrencyQuote,
    MarketSnapshot,
    CommunityMetrics,
    DeveloperMetrics,
    ProjectLinks,
    ProjectProfile,
    NewsItem,
    NewsDigest,
    SentimentBreakdown,
    InfluentialMention,
    SocialDigest,
    is_error,
)
from .sentiment import (
    NewsSentiment,
    SocialSentiment,
    classify_news_sentiment,
    classify_social_sentiment,
    mean_sentiment,
)
from .formatting import NOT_AVAILABLE, format_number, format_percentage
from .composer import ReportComposer, ReportOptions, compose_report

__all__ = [
    # Records
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

    # Sentiment
    "NewsSentiment",
    "SocialSentiment",
    "classify_news_sentiment",
    "classify_social_sentiment",
    "mean_sentiment",

    # Formatting
    "NOT_AVAILABLE",
    "format_number",
    "format_percentage",

    # Composer
    "ReportComposer",
    "ReportOptions",
    "compose_report",
]
