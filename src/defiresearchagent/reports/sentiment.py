"""Sentiment classification
========================

Two independent scoring domains, each with its own thresholds:

- **News** scores live in ``[-1, 1]`` (mean of per-article scores).
- **Social** scores live in ``[0, 1]``.

The scales are deliberately kept apart; a social score of 0.3 and a news
score of 0.3 mean different things. All thresholds are strict
greater-than / less-than comparisons.
"""

from enum import Enum
from typing import Iterable

__all__ = [
    "NewsSentiment",
    "SocialSentiment",
    "NEWS_POSITIVE_THRESHOLD",
    "NEWS_NEGATIVE_THRESHOLD",
    "classify_news_sentiment",
    "classify_social_sentiment",
    "mean_sentiment",
]


class NewsSentiment(str, Enum):
    """Overall label for a news digest."""
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class SocialSentiment(str, Enum):
    """Overall label for a social-media digest."""
    VERY_POSITIVE = "very positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


NEWS_POSITIVE_THRESHOLD = 0.2
NEWS_NEGATIVE_THRESHOLD = -0.2

# Ordered from the highest band down; first strict match wins.
_SOCIAL_BANDS = (
    (0.7, SocialSentiment.VERY_POSITIVE),
    (0.6, SocialSentiment.POSITIVE),
    (0.4, SocialSentiment.NEUTRAL),
)


def classify_news_sentiment(score: float) -> NewsSentiment:
    """Map a mean news score in ``[-1, 1]`` to a label.

    >>> classify_news_sentiment(0.25).value
    'Positive'
    >>> classify_news_sentiment(0.2).value
    'Neutral'
    """
    if score > NEWS_POSITIVE_THRESHOLD:
        return NewsSentiment.POSITIVE
    if score < NEWS_NEGATIVE_THRESHOLD:
        return NewsSentiment.NEGATIVE
    return NewsSentiment.NEUTRAL


def classify_social_sentiment(score: float) -> SocialSentiment:
    """Map a social score in ``[0, 1]`` to a label.

    >>> classify_social_sentiment(0.7).value
    'positive'
    """
    for threshold, label in _SOCIAL_BANDS:
        if score > threshold:
            return label
    return SocialSentiment.NEGATIVE


def mean_sentiment(scores: Iterable[float]) -> float:
    """Arithmetic mean of item scores, 0.0 when there are none."""
    values = [float(s) for s in scores]
    if not values:
        return 0.0
    return sum(values) / len(values)
