"""
Command line interface for the DeFi Research Agent.

Usage:
    python -m defiresearchagent report bitcoin --name Bitcoin
    python -m defiresearchagent token-info ethereum
    python -m defiresearchagent ask "How is Solana doing this week?"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from defiresearchagent.config import ResearchAgentConfig, load_config
from defiresearchagent.exceptions import ConfigurationError
from defiresearchagent.toolkits import ResearchToolkit


def default_token_name(token_id: str) -> str:
    """Display name guessed from a CoinGecko id (``avalanche-2`` -> ``Avalanche 2``)."""
    return token_id.replace("-", " ").title()


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="defiresearchagent",
        description="DeFi token research reports",
    )
    parser.add_argument("--config", type=str, help="Path to a YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Generate a full research report")
    report.add_argument("token_id", help="CoinGecko id of the token (e.g. bitcoin)")
    report.add_argument("--name", type=str, help="Display name of the token")
    report.add_argument("--no-news", action="store_true", help="Skip the news section")
    report.add_argument("--no-sentiment", action="store_true", help="Skip the social sentiment section")
    report.add_argument("--days", type=_positive_int, help="News lookback window in days")
    report.add_argument("--output", type=str, help="Write the report to this file instead of stdout")

    token_info = subparsers.add_parser("token-info", help="Print the market snapshot as JSON")
    token_info.add_argument("token_id", help="CoinGecko id of the token")

    ask = subparsers.add_parser("ask", help="Ask the research agent a question")
    ask.add_argument("question", help="Question for the agent")

    return parser


async def run_report(config: ResearchAgentConfig, args: argparse.Namespace) -> int:
    if args.days is not None:
        config.report.news_lookback_days = args.days

    async with ResearchToolkit(config=config) as toolkit:
        report = await toolkit.generate_report(
            args.token_id,
            args.name or default_token_name(args.token_id),
            include_news=False if args.no_news else None,
            include_sentiment=False if args.no_sentiment else None,
        )

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report, encoding="utf-8")
        logger.info(f"Report written to {path}")
    else:
        print(report)

    return 0 if report.startswith("# ") else 1


async def run_token_info(config: ResearchAgentConfig, args: argparse.Namespace) -> int:
    async with ResearchToolkit(config=config) as toolkit:
        result = await toolkit.get_token_info(args.token_id)

    payload = json.loads(result)
    print(json.dumps(payload, indent=2))
    return 1 if "error" in payload else 0


async def run_ask(config: ResearchAgentConfig, args: argparse.Namespace) -> int:
    from defiresearchagent.agent import create_research_agent

    async with ResearchToolkit(config=config) as toolkit:
        agent = create_research_agent(config, toolkit=toolkit)
        response = await agent.arun(args.question)

    print(response.content)
    return 0


_COMMANDS = {
    "report": run_report,
    "token-info": run_token_info,
    "ask": run_ask,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(config_file=args.config)
        if args.verbose:
            config.logging.level = "DEBUG"
            config.setup_logging()
        return asyncio.run(_COMMANDS[args.command](config, args))
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
