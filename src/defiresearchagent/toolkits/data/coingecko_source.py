from __future__ import annotations

"""CoinGecko Market & Project Data Source
========================================

Adapter around CoinGecko's ``/coins/{id}`` endpoint providing the two
mandatory report inputs:

**Market snapshot** (``market_data=true``)
- USD price (BTC price alongside), market cap and rank
- 24h / 7d / 30d price change, 24h volume, 24h high / low
- circulating / total / max supply, all-time high and its date

**Project profile** (``community_data=true&developer_data=true``)
- description, homepage, asset platform, categories, genesis date
- community sentiment votes and follower counts
- GitHub activity and project links

Both fetches return a normalized record or an ``ErrorRecord``; they never raise.

## Configuration

- ``api_key``: CoinGecko Pro key. When set the Pro base URL is used and the key
  is sent as ``x-cg-pro-api-key``.
- ``base_url``: explicit base URL override.
"""

from typing import Any, Dict, Mapping, Optional, Union

from loguru import logger

from defiresearchagent.exceptions import SourceError
from defiresearchagent.reports.models import ErrorRecord, MarketSnapshot, ProjectProfile
from defiresearchagent.toolkits.base import BaseSource
from defiresearchagent.toolkits.utils import DataValidator

__all__ = [
    "CoinGeckoSource",
    "normalize_market_snapshot",
    "normalize_project_profile",
    "DEFAULT_PUBLIC_BASE_URL",
    "DEFAULT_PRO_BASE_URL",
]

DEFAULT_PUBLIC_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"

_COIN_ENDPOINT = "/coins/{coin_id}"
_ENDPOINT_NAME = "coingecko"
_REQUIRED_COIN_FIELDS = ["id", "symbol", "name"]

TOKEN_INFO_ERROR = "Unable to fetch token information"
PROJECT_INFO_ERROR = "Unable to fetch project information"


def _section(payload: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _in_currency(section: Mapping[str, Any], key: str, currency: str = "usd") -> Any:
    """``section[key][currency]`` with missing levels treated as absent."""
    value = section.get(key)
    if isinstance(value, dict):
        return value.get(currency)
    return None


def _first(values: Any) -> Optional[str]:
    if isinstance(values, str):
        return values or None
    for value in values or []:
        if value:
            return value
    return None


def normalize_market_snapshot(payload: Mapping[str, Any]) -> MarketSnapshot:
    """Map a CoinGecko coin document (with ``market_data``) to a MarketSnapshot.

    Raises:
        SourceError: If the ``market_data`` section is missing
        pydantic.ValidationError: If mandatory fields have unusable values
    """
    sections = DataValidator.validate_sections(dict(payload), ["market_data"])
    if not sections["valid"]:
        raise SourceError(_ENDPOINT_NAME, "; ".join(sections["errors"]))

    market = payload["market_data"]
    return MarketSnapshot(
        name=payload.get("name"),
        symbol=payload.get("symbol"),
        current_price={
            "usd": _in_currency(market, "current_price"),
            "btc": _in_currency(market, "current_price", "btc"),
        },
        market_cap={"usd": _in_currency(market, "market_cap")},
        market_cap_rank=market.get("market_cap_rank", payload.get("market_cap_rank")),
        price_change_24h_percentage=market.get("price_change_percentage_24h"),
        price_change_7d_percentage=market.get("price_change_percentage_7d"),
        price_change_30d_percentage=market.get("price_change_percentage_30d"),
        total_volume=_in_currency(market, "total_volume"),
        high_24h=_in_currency(market, "high_24h"),
        low_24h=_in_currency(market, "low_24h"),
        circulating_supply=market.get("circulating_supply"),
        total_supply=market.get("total_supply"),
        max_supply=market.get("max_supply"),
        ath=_in_currency(market, "ath"),
        ath_date=_in_currency(market, "ath_date"),
    )


def normalize_project_profile(payload: Mapping[str, Any]) -> ProjectProfile:
    """Map a CoinGecko coin document (with community / developer data) to a ProjectProfile.

    Nested sections that the provider omitted become empty sub-records; list
    link fields lose their empty entries.
    """
    links = _section(payload, "links")
    community = _section(payload, "community_data")
    developer = _section(payload, "developer_data")
    repos = _section(links, "repos_url")

    return ProjectProfile(
        name=payload.get("name"),
        symbol=payload.get("symbol"),
        description=_section(payload, "description").get("en"),
        homepage=_first(links.get("homepage")),
        blockchain=payload.get("asset_platform_id"),
        categories=payload.get("categories"),
        genesis_date=payload.get("genesis_date"),
        sentiment_votes_up_percentage=payload.get("sentiment_votes_up_percentage"),
        sentiment_votes_down_percentage=payload.get("sentiment_votes_down_percentage"),
        community_data={
            "twitter_followers": community.get("twitter_followers"),
            "reddit_subscribers": community.get("reddit_subscribers"),
            "telegram_channel_user_count": community.get("telegram_channel_user_count"),
        },
        developer_data={
            "forks": developer.get("forks"),
            "stars": developer.get("stars"),
            "subscribers": developer.get("subscribers"),
            "total_issues": developer.get("total_issues"),
            "closed_issues": developer.get("closed_issues"),
            "pull_requests_merged": developer.get("pull_requests_merged"),
            "pull_request_contributors": developer.get("pull_request_contributors"),
            "commit_count_4_weeks": developer.get("commit_count_4_weeks"),
        },
        links={
            "blockchain_site": links.get("blockchain_site"),
            "official_forum_url": links.get("official_forum_url"),
            "chat_url": links.get("chat_url"),
            "announcement_url": links.get("announcement_url"),
            "github_url": repos.get("github"),
            "twitter_screen_name": links.get("twitter_screen_name"),
            "facebook_username": links.get("facebook_username"),
            "subreddit_url": links.get("subreddit_url"),
        },
    )


class CoinGeckoSource(BaseSource):
    """CoinGecko adapter for the market snapshot and project profile.

    Example:
        ```python
        source = CoinGeckoSource()
        market = await source.fetch_market_snapshot("bitcoin")
        project = await source.fetch_project_profile("bitcoin")
        await source.aclose()
        ```
    """

    source_name = _ENDPOINT_NAME

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        rate_limit: Optional[float] = None,
    ):
        """Initialize the CoinGecko source.

        Args:
            api_key: CoinGecko Pro API key (optional for the public API)
            base_url: Explicit base URL; defaults to the Pro URL when a key is
                      given, the public URL otherwise
            http_timeout: Request timeout in seconds
            max_retries: Retries for 5xx / transport failures
            retry_delay: Base backoff delay in seconds
            rate_limit: Minimum seconds between requests (None = no limit)
        """
        self._api_key = api_key

        if base_url is not None:
            self.base_url = base_url
        elif self._api_key:
            self.base_url = DEFAULT_PRO_BASE_URL
            logger.debug("Using CoinGecko Pro API with API key")
        else:
            self.base_url = DEFAULT_PUBLIC_BASE_URL
            logger.debug("Using CoinGecko public API (no API key)")

        self._http_timeout = http_timeout
        self._init_http_client(
            http_timeout=http_timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            rate_limit=rate_limit,
        )

    async def _setup_endpoints(self) -> None:
        headers = {}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        await self._http_client.add_endpoint(
            name=_ENDPOINT_NAME,
            base_url=self.base_url,
            headers=headers,
            timeout=self._http_timeout,
        )

    async def _get_coin(
        self,
        coin_id: str,
        market_data: bool = False,
        community_data: bool = False,
        developer_data: bool = False,
    ) -> Dict[str, Any]:
        """Fetch the raw ``/coins/{id}`` document with the requested sections."""
        coin_id = (coin_id or "").strip().lower()
        if not coin_id:
            raise SourceError(_ENDPOINT_NAME, "A CoinGecko coin id is required")

        if _ENDPOINT_NAME not in self._http_client.get_endpoints():
            await self._setup_endpoints()

        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": str(market_data).lower(),
            "community_data": str(community_data).lower(),
            "developer_data": str(developer_data).lower(),
            "sparkline": "false",
        }
        data = await self._http_client.get(
            _ENDPOINT_NAME, _COIN_ENDPOINT.format(coin_id=coin_id), params=params
        )

        validation = DataValidator.validate_structure(
            data, required_fields=_REQUIRED_COIN_FIELDS, expected_type=dict
        )
        if not validation["valid"]:
            raise SourceError(
                _ENDPOINT_NAME,
                f"Unexpected coin payload for '{coin_id}': {', '.join(validation['errors'])}",
            )
        return data

    async def _market_snapshot(self, coin_id: str) -> MarketSnapshot:
        data = await self._get_coin(coin_id, market_data=True)
        return normalize_market_snapshot(data)

    async def _project_profile(self, coin_id: str) -> ProjectProfile:
        data = await self._get_coin(coin_id, community_data=True, developer_data=True)
        return normalize_project_profile(data)

    async def fetch_market_snapshot(self, coin_id: str) -> Union[MarketSnapshot, ErrorRecord]:
        """Current market statistics for ``coin_id`` (e.g. ``bitcoin``)."""
        return await self._guarded(
            TOKEN_INFO_ERROR, self._market_snapshot, coin_id, identifier=coin_id
        )

    async def fetch_project_profile(self, coin_id: str) -> Union[ProjectProfile, ErrorRecord]:
        """Project metadata, community and developer metrics for ``coin_id``."""
        return await self._guarded(
            PROJECT_INFO_ERROR, self._project_profile, coin_id, identifier=coin_id
        )
