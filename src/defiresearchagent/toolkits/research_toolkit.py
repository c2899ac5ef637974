from __future__ import annotations

"""DeFi Research Toolkit
======================

Agent-facing capability layer. Exposes the research sources and the report
composer as agno tools:

- ``get_token_info``: market snapshot for a CoinGecko id
- ``get_project_research``: project profile for a CoinGecko id
- ``get_news_analysis``: recent news digest for a token name
- ``get_sentiment_analysis``: social sentiment digest for a token name
- ``generate_report``: full Markdown research report

Every tool returns a string: records and error records as JSON, the report as
Markdown. Tools never raise; source failures come back as
``{"error": ..., "details": ...}``.

## Example

```python
toolkit = ResearchToolkit(config=load_config())
try:
    report = await toolkit.generate_report("bitcoin", "Bitcoin")
finally:
    await toolkit.aclose()
```
"""

import asyncio
from datetime import date
from typing import Any, Optional

from agno.tools import Toolkit
from loguru import logger
from pydantic import BaseModel

from defiresearchagent.config import ResearchAgentConfig
from defiresearchagent.reports import ReportComposer
from defiresearchagent.toolkits.data import (
    CoinGeckoSource,
    NewsSource,
    SimulatedNewsSource,
    SimulatedSocialSource,
    SocialSource,
)

__all__ = ["ResearchToolkit"]


async def _not_requested() -> None:
    return None


class ResearchToolkit(Toolkit):
    """Research tools for cryptocurrency tokens.

    Sources default to the configured CoinGecko adapter and the simulated news
    and social adapters; any of them can be swapped for another implementation
    of the same contract.
    """

    _toolkit_category = "crypto"
    _toolkit_type = "research"

    def __init__(
        self,
        config: Optional[ResearchAgentConfig] = None,
        market_source: Optional[CoinGeckoSource] = None,
        news_source: Optional[NewsSource] = None,
        social_source: Optional[SocialSource] = None,
        name: str = "defi_research_toolkit",
        **kwargs: Any,
    ):
        """Initialize the research toolkit.

        Args:
            config: Agent configuration (defaults are used when omitted)
            market_source: Adapter for market snapshots and project profiles
            news_source: Adapter for news digests
            social_source: Adapter for social sentiment digests
            name: Name identifier for this toolkit instance
            **kwargs: Additional arguments passed to Toolkit
        """
        self.config = config or ResearchAgentConfig()

        cg = self.config.coingecko
        self.market_source = market_source or CoinGeckoSource(
            api_key=cg.api_key,
            base_url=cg.base_url,
            http_timeout=cg.timeout,
            max_retries=cg.max_retries,
            retry_delay=cg.retry_delay,
            rate_limit=cg.rate_limit,
        )
        self.news_source = news_source or SimulatedNewsSource()
        self.social_source = social_source or SimulatedSocialSource()
        self.composer = ReportComposer(self.config.report.to_options())

        available_tools = [
            self.get_token_info,
            self.get_project_research,
            self.get_news_analysis,
            self.get_sentiment_analysis,
            self.generate_report,
        ]
        super().__init__(name=name, tools=available_tools, **kwargs)

        logger.debug(
            f"Initialized ResearchToolkit with sources: "
            f"{self.market_source.source_name}, {self.news_source.source_name}, "
            f"{self.social_source.source_name}"
        )

    @staticmethod
    def _to_json(record: BaseModel) -> str:
        return record.model_dump_json()

    async def get_token_info(self, token_id: str) -> str:
        """Get basic price and market data for a cryptocurrency token.

        Args:
            token_id: The CoinGecko ID of the token (e.g. bitcoin, ethereum, solana)

        Returns:
            str: JSON market snapshot, or a JSON error object
        """
        return self._to_json(await self.market_source.fetch_market_snapshot(token_id))

    async def get_project_research(self, token_id: str) -> str:
        """Get detailed information about a blockchain project.

        Args:
            token_id: The CoinGecko ID of the token

        Returns:
            str: JSON project profile, or a JSON error object
        """
        return self._to_json(await self.market_source.fetch_project_profile(token_id))

    async def get_news_analysis(self, token_name: str, days: int = 7) -> str:
        """Get and analyze recent news about a cryptocurrency project.

        Args:
            token_name: The name of the token (e.g. Bitcoin, Ethereum, Solana)
            days: Number of days to look back for news

        Returns:
            str: JSON news digest, or a JSON error object
        """
        return self._to_json(await self.news_source.fetch(token_name, days=days))

    async def get_sentiment_analysis(self, token_name: str) -> str:
        """Analyze social media sentiment for a cryptocurrency.

        Args:
            token_name: The name of the token (e.g. Bitcoin, Ethereum, Solana)

        Returns:
            str: JSON sentiment digest, or a JSON error object
        """
        return self._to_json(await self.social_source.fetch(token_name))

    async def generate_report(
        self,
        token_id: str,
        token_name: str,
        include_news: Optional[bool] = None,
        include_sentiment: Optional[bool] = None,
        generated_on: Optional[date] = None,
    ) -> str:
        """Generate a comprehensive research report for a cryptocurrency.

        The four sources are fetched concurrently, then rendered by the report
        composer.

        Args:
            token_id: The CoinGecko ID of the token
            token_name: The name of the token
            include_news: Whether to include news analysis (configured default when omitted)
            include_sentiment: Whether to include sentiment analysis (configured default when omitted)
            generated_on: Date printed in the disclaimer (today when omitted)

        Returns:
            str: Markdown report, or a one-line diagnostic
        """
        report_config = self.config.report
        if include_news is None:
            include_news = report_config.include_news
        if include_sentiment is None:
            include_sentiment = report_config.include_sentiment

        logger.info(
            f"Generating report for {token_name} ({token_id}): "
            f"news={include_news}, sentiment={include_sentiment}"
        )

        try:
            market, project, news, social = await asyncio.gather(
                self.market_source.fetch_market_snapshot(token_id),
                self.market_source.fetch_project_profile(token_id),
                self.news_source.fetch(token_name, days=report_config.news_lookback_days)
                if include_news
                else _not_requested(),
                self.social_source.fetch(token_name) if include_sentiment else _not_requested(),
            )
        except Exception as e:
            logger.error(f"Error gathering report data for {token_name}: {e}")
            return f"Error generating report: {e}"

        return self.composer.compose(
            token_name, market, project, news=news, social=social, generated_on=generated_on
        )

    async def aclose(self) -> None:
        """Close the HTTP clients owned by the sources."""
        for source in (self.market_source, self.news_source, self.social_source):
            await source.aclose()

    async def __aenter__(self) -> "ResearchToolkit":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
