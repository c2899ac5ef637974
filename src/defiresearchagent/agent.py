"""
Conversational DeFi research agent.

Wires the research toolkit into an agno ``Agent`` backed by LiteLLM.
"""

from typing import Optional

from agno.agent import Agent as AgnoAgent
from agno.models.litellm import LiteLLM
from loguru import logger

from defiresearchagent.config import ResearchAgentConfig
from defiresearchagent.exceptions import MissingConfigurationError
from defiresearchagent.toolkits import ResearchToolkit

AGENT_NAME = "DeFiResearch"

SYSTEM_PROMPT = """You are DeFiResearch, an expert AI agent specializing in cryptocurrency and blockchain project research.
Your goal is to provide comprehensive, balanced analysis of crypto tokens to help users make informed decisions.
Always be objective, transparent about limitations in your data, and avoid making specific investment recommendations.

When users ask about tokens, you should:
1. Identify the token they're referring to (matching to CoinGecko IDs when possible)
2. Gather relevant market data and project information
3. Analyze recent news and sentiment if requested
4. Present information in a clear, structured format

Common token IDs include:
- bitcoin (BTC)
- ethereum (ETH)
- solana (SOL)
- cardano (ADA)
- polkadot (DOT)
- avalanche-2 (AVAX)

If a user asks for a complete analysis, generate a full research report that combines all available data.
"""


def create_research_agent(
    config: ResearchAgentConfig,
    toolkit: Optional[ResearchToolkit] = None,
) -> AgnoAgent:
    """
    Build the research agent.

    Args:
        config: Agent configuration; ``config.llm`` selects the model
        toolkit: Pre-built toolkit (one is created from ``config`` when omitted)

    Returns:
        Configured agno Agent

    Raises:
        MissingConfigurationError: If no LLM API key is configured
    """
    missing_keys = config.validate_api_keys()
    if missing_keys:
        logger.error(f"Cannot start {AGENT_NAME}: missing {', '.join(missing_keys)}")
        raise MissingConfigurationError("api_key", section="llm")

    llm = config.llm

    model_kwargs = {"id": llm.model_id, "api_key": llm.api_key}
    for param in ("temperature", "max_tokens", "api_base"):
        value = getattr(llm, param)
        if value is not None:
            model_kwargs[param] = value

    toolkit = toolkit or ResearchToolkit(config=config)

    agent = AgnoAgent(
        model=LiteLLM(**model_kwargs),
        system_message=SYSTEM_PROMPT,
        tools=[toolkit],
        name=AGENT_NAME,
    )
    logger.info(f"Initialized {AGENT_NAME} agent with model {llm.model_id}")
    return agent
