from __future__ import annotations

"""Social Sentiment Sources
=========================

Social-media adapters producing a :class:`SocialDigest` for a token.

``SimulatedSocialSource`` stands in for a Twitter / sentiment-service feed:
the overall score is drawn from ``[0.5, 1.0]``, tweet volume from
``[1000, 10000)``, and the breakdown fractions independently (they are not
normalized to sum to 1). Hashtags and the two influential mentions are
templated on the token name.
"""

import math
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from loguru import logger

from defiresearchagent.exceptions import SourceError
from defiresearchagent.reports.models import (
    ErrorRecord,
    InfluentialMention,
    SentimentBreakdown,
    SocialDigest,
)
from defiresearchagent.toolkits.base import BaseSource

__all__ = ["SocialSource", "SimulatedSocialSource", "SOCIAL_ERROR"]

SOCIAL_ERROR = "Unable to analyze sentiment"
SOCIAL_PERIOD = "Last 7 days"

_HASHTAG_TEMPLATES = ["#{token}", "#{token}ToTheMoon", "#Buy{token}", "#{token}News"]

_MENTION_TEMPLATES = [
    (
        "crypto_influencer1",
        245000,
        "Really impressed with the progress of {token} lately. The tech is solid! #{token}",
    ),
    (
        "blockchain_analyst",
        124000,
        "Our analysis shows {token} adoption growing at 15% month-over-month. Worth watching! #{token}",
    ),
]


class SocialSource(BaseSource, ABC):
    """Contract for social-sentiment adapters."""

    source_name = "social"

    async def fetch(self, token_name: str) -> Union[SocialDigest, ErrorRecord]:
        """Aggregate social sentiment for ``token_name``."""
        return await self._guarded(
            SOCIAL_ERROR, self._checked_fetch, token_name, identifier=token_name
        )

    async def _checked_fetch(self, token_name: str) -> SocialDigest:
        if not token_name or not token_name.strip():
            raise SourceError(self.source_name, "A token name is required")
        return await self._fetch_digest(token_name.strip())

    @abstractmethod
    async def _fetch_digest(self, token_name: str) -> SocialDigest:
        """Fetch and normalize the digest; may raise."""


class SimulatedSocialSource(SocialSource):
    """Randomized social-sentiment stand-in with a positive bias."""

    source_name = "simulated_social"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def _uniform(self, low: float, span: float) -> float:
        return round(low + self._rng.random() * span, 2)

    def _mentions(self, token_name: str) -> List[InfluentialMention]:
        return [
            InfluentialMention(
                username=username,
                followers=followers,
                tweet=template.format(token=token_name),
                sentiment="positive",
            )
            for username, followers, template in _MENTION_TEMPLATES
        ]

    async def _fetch_digest(self, token_name: str) -> SocialDigest:
        score = self._uniform(0.5, 0.5)
        tweet_volume = math.floor(1000 + self._rng.random() * 9000)
        breakdown = SentimentBreakdown(
            positive=self._uniform(0.5, 0.3),
            neutral=self._uniform(0.1, 0.2),
            negative=self._uniform(0.1, 0.2),
        )

        digest = SocialDigest.from_score(
            token=token_name,
            period=SOCIAL_PERIOD,
            sentiment_score=score,
            tweet_volume=tweet_volume,
            sentiment_breakdown=breakdown,
            trending_hashtags=[tag.format(token=token_name) for tag in _HASHTAG_TEMPLATES],
            influential_mentions=self._mentions(token_name),
        )
        logger.debug(
            f"Simulated social sentiment for {token_name}: "
            f"{digest.overall_sentiment.value} ({digest.sentiment_score})"
        )
        return digest
