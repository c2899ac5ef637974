"""Research report composer
=========================

Assembles the Markdown research report from the four normalized inputs.

The composer never fetches or retries. It renders with whatever it is handed:

- market / project are mandatory; an ``ErrorRecord`` for either short-circuits
  into a one-line diagnostic.
- news / social are optional; an ``ErrorRecord`` or a missing value simply
  drops the corresponding section.
- any unexpected failure while rendering becomes ``Error generating report: ...``.
  :meth:`ReportComposer.compose` never raises.

Inputs may be records, plain mappings or JSON strings (the form exchanged by
the agent capability layer); they are validated into records at this boundary.
"""

import json
from datetime import date
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from defiresearchagent.exceptions import ReportCompositionError
from .formatting import (
    NOT_AVAILABLE,
    capitalize_first,
    format_count,
    format_date,
    format_fraction_percentage,
    format_number,
    format_one_decimal,
    format_percentage,
    format_price,
    format_score,
    or_na,
    strip_markup,
    truncate_text,
)
from .models import (
    ErrorRecord,
    MarketSnapshot,
    NewsDigest,
    ProjectProfile,
    SocialDigest,
    is_error,
)

__all__ = ["ReportOptions", "ReportComposer", "compose_report", "DISCLAIMER"]

R = TypeVar("R", bound=BaseModel)
RecordInput = Union[BaseModel, Mapping[str, Any], str, None]

DISCLAIMER = (
    "This report is generated for informational purposes only and should not be "
    "considered financial advice. Always conduct your own research before making "
    "investment decisions. Data may be delayed or inaccurate. "
)
NO_DESCRIPTION = "No description available."


class ReportOptions(BaseModel):
    """Rendering knobs for the composer."""
    description_max_length: int = Field(default=500, ge=1)
    max_explorer_links: int = Field(default=3, ge=0)


def _coerce(value: RecordInput, model: Type[R], section: str) -> Union[R, ErrorRecord, None]:
    """Validate a record, mapping or JSON string into ``model`` (or ErrorRecord).

    A blank string counts as absent; only a truthy ``error`` key marks a failure.
    """
    if value is None or isinstance(value, (model, ErrorRecord)):
        return value
    if isinstance(value, BaseModel):
        raise ReportCompositionError(
            section, f"expected {model.__name__}, got {type(value).__name__}"
        )
    if isinstance(value, (str, bytes)):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ReportCompositionError(section, f"invalid JSON: {e}", cause=e)
    if not isinstance(value, Mapping):
        raise ReportCompositionError(
            section, f"expected a mapping, got {type(value).__name__}"
        )
    if value.get("error"):
        return ErrorRecord.model_validate(
            {"error": str(value.get("error")), "details": str(value.get("details") or "")}
        )
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise ReportCompositionError(section, f"malformed {model.__name__}: {e}", cause=e)


class ReportComposer:
    """Render a research report from already-fetched records.

    Example:
        ```python
        composer = ReportComposer()
        text = composer.compose("Bitcoin", market, project, news=news, social=None)
        ```
    """

    def __init__(self, options: Optional[ReportOptions] = None):
        self.options = options or ReportOptions()

    def compose(
        self,
        token_name: str,
        market: RecordInput,
        project: RecordInput,
        news: RecordInput = None,
        social: RecordInput = None,
        generated_on: Optional[date] = None,
    ) -> str:
        """Build the report text; always returns a string.

        Args:
            token_name: Display name used in the title and empty-news message
            market: MarketSnapshot or ErrorRecord (mandatory)
            project: ProjectProfile or ErrorRecord (mandatory)
            news: NewsDigest, ErrorRecord or None
            social: SocialDigest, ErrorRecord or None
            generated_on: Date printed in the disclaimer (defaults to today)

        Returns:
            str: The Markdown report, or a one-line diagnostic
        """
        try:
            market_rec = _coerce(market, MarketSnapshot, "market")
            if market_rec is None:
                raise ReportCompositionError("market", "market data is required")
            if is_error(market_rec):
                logger.warning(f"Token data unavailable for {token_name}: {market_rec.details}")
                return f"Error in token data: {market_rec.error}"

            project_rec = _coerce(project, ProjectProfile, "project")
            if project_rec is None:
                raise ReportCompositionError("project", "project data is required")
            if is_error(project_rec):
                logger.warning(f"Project data unavailable for {token_name}: {project_rec.details}")
                return f"Error in project data: {project_rec.error}"

            news_rec = _coerce(news, NewsDigest, "news")
            social_rec = _coerce(social, SocialDigest, "social")

            parts: List[str] = [
                f"# {token_name} ({market_rec.symbol}) Research Report\n\n",
                self._market_section(market_rec),
                self._overview_section(project_rec),
                self._community_section(project_rec),
                self._developer_section(project_rec),
            ]

            if isinstance(news_rec, NewsDigest):
                parts.append(self._news_section(token_name, news_rec))
            else:
                logger.debug(f"Skipping news section for {token_name} ({_absence(news_rec)})")

            if isinstance(social_rec, SocialDigest):
                parts.append(self._social_section(social_rec))
            else:
                logger.debug(f"Skipping social section for {token_name} ({_absence(social_rec)})")

            parts.append(self._links_section(project_rec))
            parts.append(self._disclaimer_section(generated_on or date.today()))
            return "".join(parts)

        except Exception as e:
            logger.error(f"Error generating report for {token_name}: {e}")
            message = e.message if isinstance(e, ReportCompositionError) else str(e)
            return f"Error generating report: {message}"

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _market_section(self, m: MarketSnapshot) -> str:
        rank = m.market_cap_rank if m.market_cap_rank is not None else NOT_AVAILABLE
        lines = [
            "## Market Data\n\n",
            f"* **Current Price**: {format_price(m.current_price.usd)}\n",
            f"* **Market Cap**: {format_number(m.market_cap.usd)} (Rank #{rank})\n",
            f"* **24h Change**: {format_percentage(m.price_change_24h_percentage)}\n",
            f"* **7d Change**: {format_percentage(m.price_change_7d_percentage)}\n",
            f"* **30d Change**: {format_percentage(m.price_change_30d_percentage)}\n",
            f"* **24h Volume**: {format_number(m.total_volume)}\n",
            f"* **Circulating Supply**: {format_count(m.circulating_supply)} {m.symbol}\n",
            f"* **Total Supply**: {format_count(m.total_supply)} {m.symbol}\n",
            f"* **Max Supply**: {format_count(m.max_supply)} {m.symbol}\n\n",
        ]
        return "".join(lines)

    def _overview_section(self, p: ProjectProfile) -> str:
        description = strip_markup(p.description) or NO_DESCRIPTION
        description = truncate_text(description, self.options.description_max_length)
        categories = ", ".join(p.categories) or NOT_AVAILABLE
        return (
            "## Project Overview\n\n"
            f"{description}\n\n"
            f"* **Genesis Date**: {or_na(p.genesis_date)}\n"
            f"* **Official Website**: {or_na(p.homepage)}\n"
            f"* **Categories**: {categories}\n\n"
        )

    def _community_section(self, p: ProjectProfile) -> str:
        c = p.community_data
        votes = p.sentiment_votes_up_percentage
        votes_text = f"{format_one_decimal(votes)}%" if votes is not None else NOT_AVAILABLE
        return (
            "## Community Metrics\n\n"
            f"* **Twitter Followers**: {format_count(c.twitter_followers)}\n"
            f"* **Reddit Subscribers**: {format_count(c.reddit_subscribers)}\n"
            f"* **Telegram Members**: {format_count(c.telegram_channel_user_count)}\n"
            f"* **Positive Sentiment Votes**: {votes_text}\n\n"
        )

    def _developer_section(self, p: ProjectProfile) -> str:
        d = p.developer_data
        return (
            "## Developer Activity\n\n"
            f"* **GitHub Stars**: {format_count(d.stars)}\n"
            f"* **Forks**: {format_count(d.forks)}\n"
            f"* **Contributors**: {format_count(d.pull_request_contributors)}\n"
            f"* **Commits (4 weeks)**: {format_count(d.commit_count_4_weeks)}\n\n"
        )

    def _news_section(self, token_name: str, news: NewsDigest) -> str:
        lines = [
            "## Recent News\n\n",
            f"Overall news sentiment: **{news.overall_sentiment.value}** "
            f"(score: {format_score(news.average_sentiment_score)})\n\n",
        ]
        if not news.news:
            lines.append(f"No recent news found for {token_name}.\n\n")
        for index, item in enumerate(news.news, 1):
            lines.append(f"{index}. **{item.title}** ({format_date(item.published_at)})\n")
            lines.append(
                f"   Source: {item.source} | Sentiment score: {format_score(item.sentiment_score)}\n\n"
            )
        return "".join(lines)

    def _social_section(self, social: SocialDigest) -> str:
        b = social.sentiment_breakdown
        lines = [
            "## Social Media Sentiment\n\n",
            f"* **Overall Sentiment**: {capitalize_first(social.overall_sentiment.value)}\n",
            f"* **Sentiment Score**: {format_score(social.sentiment_score)}\n",
            f"* **Tweet Volume**: {format_count(social.tweet_volume)}\n",
            "* **Sentiment Breakdown**:\n",
            f"  * Positive: {format_fraction_percentage(b.positive)}\n",
            f"  * Neutral: {format_fraction_percentage(b.neutral)}\n",
            f"  * Negative: {format_fraction_percentage(b.negative)}\n\n",
            "### Trending Hashtags\n",
        ]
        lines.extend(f"* {tag}\n" for tag in social.trending_hashtags)
        lines.append("\n")

        if social.influential_mentions:
            lines.append("### Notable Mentions\n\n")
            for mention in social.influential_mentions:
                lines.append(
                    f"* **@{mention.username}** ({format_count(mention.followers)} followers):\n"
                )
                lines.append(f"  \"{mention.tweet}\"\n\n")
        return "".join(lines)

    def _links_section(self, p: ProjectProfile) -> str:
        links = p.links
        lines = ["## Important Links\n\n"]

        explorers = links.blockchain_site[: self.options.max_explorer_links]
        if explorers:
            lines.append("* **Blockchain Explorers**:\n")
            lines.extend(f"  * {site}\n" for site in explorers)
            lines.append("\n")

        if links.github_url:
            lines.append(f"* **GitHub**: {links.github_url[0]}\n")
        if links.twitter_screen_name:
            lines.append(f"* **Twitter**: https://twitter.com/{links.twitter_screen_name}\n")
        if links.subreddit_url:
            lines.append(f"* **Reddit**: {links.subreddit_url}\n")
        return "".join(lines)

    def _disclaimer_section(self, generated_on: date) -> str:
        return (
            "\n## Disclaimer\n\n"
            f"{DISCLAIMER}"
            f"This report was auto-generated on {format_date(generated_on)}."
        )


def _absence(record: Any) -> str:
    if record is None:
        return "not requested"
    if is_error(record):
        return f"source error: {record.error}"
    return type(record).__name__


def compose_report(
    token_name: str,
    market: RecordInput,
    project: RecordInput,
    news: RecordInput = None,
    social: RecordInput = None,
    *,
    generated_on: Optional[date] = None,
    options: Optional[ReportOptions] = None,
) -> str:
    """Functional shortcut for :meth:`ReportComposer.compose`."""
    return ReportComposer(options).compose(
        token_name, market, project, news=news, social=social, generated_on=generated_on
    )
