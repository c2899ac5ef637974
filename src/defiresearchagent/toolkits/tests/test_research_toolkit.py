"""
Tests for the ResearchToolkit capability layer.
"""
import json
import random
from datetime import date
from unittest.mock import AsyncMock, Mock

import pytest

from defiresearchagent.config import ResearchAgentConfig
from defiresearchagent.reports import ErrorRecord, MarketSnapshot, ProjectProfile
from defiresearchagent.toolkits import ResearchToolkit
from defiresearchagent.toolkits.data import (
    CoinGeckoSource,
    SimulatedNewsSource,
    SimulatedSocialSource,
)
from defiresearchagent.toolkits.data.coingecko_source import DEFAULT_PRO_BASE_URL


@pytest.fixture
def config():
    return ResearchAgentConfig(coingecko={"api_key": None})


@pytest.fixture
def market_source():
    source = Mock()
    source.source_name = "coingecko"
    source.fetch_market_snapshot = AsyncMock(return_value=MarketSnapshot(
        name="Solana",
        symbol="sol",
        current_price={"usd": 150.25},
        market_cap={"usd": 70_000_000_000},
        market_cap_rank=5,
    ))
    source.fetch_project_profile = AsyncMock(return_value=ProjectProfile(
        name="Solana",
        symbol="sol",
        description="Solana is a high-performance blockchain.",
        links={"twitter_screen_name": "solana"},
    ))
    source.aclose = AsyncMock()
    return source


@pytest.fixture
def toolkit(config, market_source, fixed_now):
    return ResearchToolkit(
        config=config,
        market_source=market_source,
        news_source=SimulatedNewsSource(rng=random.Random(3), clock=lambda: fixed_now),
        social_source=SimulatedSocialSource(rng=random.Random(3)),
    )


class TestConstruction:

    def test_default_sources_from_config(self):
        config = ResearchAgentConfig(coingecko={"api_key": "cg-key", "timeout": 5.0, "max_retries": 1})
        toolkit = ResearchToolkit(config=config)

        assert toolkit.name == "defi_research_toolkit"
        assert isinstance(toolkit.market_source, CoinGeckoSource)
        assert toolkit.market_source.base_url == DEFAULT_PRO_BASE_URL
        assert toolkit.market_source._http_client._default_timeout == 5.0
        assert isinstance(toolkit.news_source, SimulatedNewsSource)
        assert isinstance(toolkit.social_source, SimulatedSocialSource)

    def test_composer_options_from_config(self, market_source):
        config = ResearchAgentConfig(report={"description_max_length": 50, "max_explorer_links": 1})
        toolkit = ResearchToolkit(config=config, market_source=market_source)

        assert toolkit.composer.options.description_max_length == 50
        assert toolkit.composer.options.max_explorer_links == 1


class TestDataTools:
    """Single-source tools return JSON strings."""

    @pytest.mark.asyncio
    async def test_get_token_info(self, toolkit, market_source):
        result = json.loads(await toolkit.get_token_info("solana"))

        assert result["symbol"] == "SOL"
        assert result["current_price"]["usd"] == 150.25
        market_source.fetch_market_snapshot.assert_awaited_once_with("solana")

    @pytest.mark.asyncio
    async def test_get_token_info_error(self, toolkit, market_source):
        market_source.fetch_market_snapshot.return_value = ErrorRecord(
            error="Unable to fetch token information", details="HTTP 404 error: coin not found"
        )

        result = json.loads(await toolkit.get_token_info("nope"))

        assert result == {
            "error": "Unable to fetch token information",
            "details": "HTTP 404 error: coin not found",
        }

    @pytest.mark.asyncio
    async def test_get_project_research(self, toolkit):
        result = json.loads(await toolkit.get_project_research("solana"))

        assert result["description"] == "Solana is a high-performance blockchain."
        assert result["links"]["twitter_screen_name"] == "solana"

    @pytest.mark.asyncio
    async def test_get_news_analysis(self, toolkit):
        result = json.loads(await toolkit.get_news_analysis("Solana", days=3))

        assert result["token"] == "Solana"
        assert result["period"] == "Last 3 days"
        assert result["news_count"] == 5
        assert result["overall_sentiment"] in ("Positive", "Neutral", "Negative")

    @pytest.mark.asyncio
    async def test_get_sentiment_analysis(self, toolkit):
        result = json.loads(await toolkit.get_sentiment_analysis("Solana"))

        assert result["token"] == "Solana"
        assert result["trending_hashtags"][0] == "#Solana"
        assert len(result["influential_mentions"]) == 2


class TestGenerateReport:

    @pytest.mark.asyncio
    async def test_full_report(self, toolkit):
        report = await toolkit.generate_report("solana", "Solana", generated_on=date(2024, 5, 10))

        assert report.startswith("# Solana (SOL) Research Report\n\n")
        assert "* **Market Cap**: $70.00B (Rank #5)\n" in report
        assert "## Recent News" in report
        assert "## Social Media Sentiment" in report
        assert "* **Twitter**: https://twitter.com/solana\n" in report
        assert report.endswith("This report was auto-generated on 5/10/2024.")

    @pytest.mark.asyncio
    async def test_optional_sections_skipped(self, config, market_source):
        news_source = Mock(source_name="news", fetch=AsyncMock(), aclose=AsyncMock())
        social_source = Mock(source_name="social", fetch=AsyncMock(), aclose=AsyncMock())
        toolkit = ResearchToolkit(
            config=config,
            market_source=market_source,
            news_source=news_source,
            social_source=social_source,
        )

        report = await toolkit.generate_report(
            "solana", "Solana", include_news=False, include_sentiment=False
        )

        assert "## Recent News" not in report
        assert "## Social Media Sentiment" not in report
        news_source.fetch.assert_not_called()
        social_source.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_config_defaults_apply(self, market_source, fixed_now):
        config = ResearchAgentConfig(report={"include_sentiment": False, "news_lookback_days": 30})
        news_source = SimulatedNewsSource(rng=random.Random(1), clock=lambda: fixed_now)
        toolkit = ResearchToolkit(config=config, market_source=market_source, news_source=news_source)

        report = await toolkit.generate_report("solana", "Solana")

        assert "## Recent News" in report
        assert "## Social Media Sentiment" not in report

    @pytest.mark.asyncio
    async def test_news_lookback_from_config(self, market_source):
        config = ResearchAgentConfig(report={"news_lookback_days": 14})
        news_source = Mock(source_name="news", fetch=AsyncMock(return_value=None), aclose=AsyncMock())
        toolkit = ResearchToolkit(config=config, market_source=market_source, news_source=news_source)

        await toolkit.generate_report("solana", "Solana", include_sentiment=False)

        news_source.fetch.assert_awaited_once_with("Solana", days=14)

    @pytest.mark.asyncio
    async def test_news_failure_degrades(self, toolkit):
        toolkit.news_source = Mock(
            fetch=AsyncMock(return_value=ErrorRecord(error="Unable to analyze news", details="down"))
        )

        report = await toolkit.generate_report("solana", "Solana")

        assert "## Recent News" not in report
        assert "## Social Media Sentiment" in report
        assert "Unable to analyze news" not in report

    @pytest.mark.asyncio
    async def test_token_data_failure(self, toolkit, market_source):
        market_source.fetch_market_snapshot.return_value = ErrorRecord(
            error="Unable to fetch token information", details="HTTP 404 error"
        )

        report = await toolkit.generate_report("nope", "Nope")

        assert report == "Error in token data: Unable to fetch token information"

    @pytest.mark.asyncio
    async def test_unexpected_gather_failure(self, toolkit, market_source):
        market_source.fetch_project_profile.side_effect = RuntimeError("boom")

        report = await toolkit.generate_report("solana", "Solana")

        assert report == "Error generating report: boom"

    @pytest.mark.asyncio
    async def test_deterministic_with_fixed_inputs(self, config, market_source, fixed_now):
        def build():
            return ResearchToolkit(
                config=config,
                market_source=market_source,
                news_source=SimulatedNewsSource(rng=random.Random(9), clock=lambda: fixed_now),
                social_source=SimulatedSocialSource(rng=random.Random(9)),
            )

        first = await build().generate_report("solana", "Solana", generated_on=date(2024, 5, 10))
        second = await build().generate_report("solana", "Solana", generated_on=date(2024, 5, 10))

        assert first == second


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_aclose_closes_sources(self, toolkit, market_source):
        await toolkit.aclose()
        market_source.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_async_context_manager(self, config, market_source):
        async with ResearchToolkit(config=config, market_source=market_source) as toolkit:
            assert toolkit.market_source is market_source
        market_source.aclose.assert_awaited_once()
