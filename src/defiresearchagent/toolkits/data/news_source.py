from __future__ import annotations

"""News Sources
=============

Recent-news adapters producing a :class:`NewsDigest` for a token.

``NewsSource`` fixes the adapter contract (``fetch`` never raises, failures
come back as an ``ErrorRecord`` with the ``Unable to analyze news`` summary);
concrete sources implement ``_fetch_digest``.

``SimulatedNewsSource`` is the stand-in used until a real news feed is wired
in. It produces five headline templates with per-item sentiment drawn
uniformly from ``[-0.4, 0.8]`` (biased positive) and publish dates spread
over the lookback window. The random generator and the clock are injectable
so tests can pin the output.
"""

import math
import random
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple, Union

from loguru import logger

from defiresearchagent.exceptions import SourceError
from defiresearchagent.reports.models import ErrorRecord, NewsDigest, NewsItem
from defiresearchagent.toolkits.base import BaseSource

__all__ = ["NewsSource", "SimulatedNewsSource", "NEWS_ERROR", "DEFAULT_LOOKBACK_DAYS"]

NEWS_ERROR = "Unable to analyze news"
DEFAULT_LOOKBACK_DAYS = 7

# (headline template, outlet)
_HEADLINES: List[Tuple[str, str]] = [
    ("{token} Announces Major Partnership with Tech Giant", "CryptoNews"),
    ("New {token} Feature Set to Launch Next Month", "BlockchainToday"),
    ("{token} Foundation Announces Grants Program", "CryptoDaily"),
    ("Analysts Predict {token} Price Movement Based on Technical Patterns", "CoinDesk"),
    ("{token} Network Activity Reaches All-Time High", "CoinTelegraph"),
]

_SCORE_LOW = -0.4
_SCORE_SPAN = 1.2


def lookback_period(days: int) -> str:
    return f"Last {days} days"


class NewsSource(BaseSource, ABC):
    """Contract for recent-news adapters."""

    source_name = "news"

    async def fetch(
        self, token_name: str, days: int = DEFAULT_LOOKBACK_DAYS
    ) -> Union[NewsDigest, ErrorRecord]:
        """Recent news about ``token_name`` over the last ``days`` days."""
        return await self._guarded(
            NEWS_ERROR, self._checked_fetch, token_name, days, identifier=token_name
        )

    async def _checked_fetch(self, token_name: str, days: int) -> NewsDigest:
        if not token_name or not token_name.strip():
            raise SourceError(self.source_name, "A token name is required")
        if days < 1:
            raise SourceError(self.source_name, f"Lookback must be at least 1 day, got {days}")
        return await self._fetch_digest(token_name.strip(), days)

    @abstractmethod
    async def _fetch_digest(self, token_name: str, days: int) -> NewsDigest:
        """Fetch and normalize the digest; may raise."""


class SimulatedNewsSource(NewsSource):
    """Randomized news stand-in.

    Example:
        ```python
        source = SimulatedNewsSource(rng=random.Random(42))
        digest = await source.fetch("Bitcoin", days=7)
        print(digest.overall_sentiment.value, digest.average_sentiment_score)
        ```
    """

    source_name = "simulated_news"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._rng = rng or random.Random()
        self._clock = clock or self.utc_now

    def _score(self) -> float:
        return round(self._rng.random() * _SCORE_SPAN + _SCORE_LOW, 2)

    def _published_at(self, now: datetime, days: int) -> datetime:
        return now - timedelta(days=math.floor(self._rng.random() * days))

    async def _fetch_digest(self, token_name: str, days: int) -> NewsDigest:
        now = self._clock()
        items = [
            NewsItem(
                title=template.format(token=token_name),
                published_at=self._published_at(now, days),
                url=f"https://example.com/news-{index}",
                source=outlet,
                sentiment_score=self._score(),
            )
            for index, (template, outlet) in enumerate(_HEADLINES, start=1)
        ]
        digest = NewsDigest.from_items(token_name, lookback_period(days), items)
        logger.debug(
            f"Simulated {digest.news_count} news items for {token_name}: "
            f"{digest.overall_sentiment.value} ({digest.average_sentiment_score})"
        )
        return digest
