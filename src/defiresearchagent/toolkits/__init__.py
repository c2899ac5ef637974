"""
DeFi Research Toolkits

Source adapters and the agent-facing capability layer.

Architecture:
- base/: BaseSource, the adapter error boundary and HTTP client setup
- utils/: HTTP transport and payload validation helpers
- data/: CoinGecko, news and social source adapters
- research_toolkit.py: agno Toolkit exposing the research tools
- tests/: test suite for all components

Usage:
    from defiresearchagent.toolkits import (
        ResearchToolkit,                       # Capability layer
        CoinGeckoSource, SimulatedNewsSource,  # Adapters
        DataHTTPClient,                        # Utilities
    )
"""

# Base classes for source adapters
from .base import BaseSource

# Utility modules
from .utils import (
    DataValidator,
    DataHTTPClient,
    HTTPClientError,
)

# Source adapters
from .data import (
    CoinGeckoSource,
    NewsSource,
    SimulatedNewsSource,
    SocialSource,
    SimulatedSocialSource,
    normalize_market_snapshot,
    normalize_project_profile,
)

# Capability layer
from .research_toolkit import ResearchToolkit

__all__ = [
    # Base classes
    "BaseSource",

    # Utility modules
    "DataValidator",
    "DataHTTPClient",
    "HTTPClientError",

    # Source adapters
    "CoinGeckoSource",
    "NewsSource",
    "SimulatedNewsSource",
    "SocialSource",
    "SimulatedSocialSource",
    "normalize_market_snapshot",
    "normalize_project_profile",

    # Capability layer
    "ResearchToolkit",
]
