"""
DeFi Research Agent

Builds Markdown research reports for crypto tokens from market data, project
metadata, recent news and social sentiment, and exposes the same capabilities
as tools for a conversational agent.
"""

from .config import ResearchAgentConfig, load_config
from .exceptions import (
    ResearchAgentError,
    ConfigurationError,
    SourceError,
    ReportCompositionError,
)
from .reports import ReportComposer, ReportOptions, compose_report

__version__ = "0.1.0"

__all__ = [
    "ResearchAgentConfig",
    "load_config",
    "ResearchAgentError",
    "ConfigurationError",
    "SourceError",
    "ReportCompositionError",
    "ReportComposer",
    "ReportOptions",
    "compose_report",
    "__version__",
]
