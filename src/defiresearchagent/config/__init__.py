"""
Configuration module for the DeFi Research Agent.

Exports:
    - ResearchAgentConfig: The main Pydantic model for all configuration settings.
    - CoinGeckoConfig, LLMConfig, ReportConfig, LoggingConfig: Sub-models for
      specific configuration sections.
    - load_config: Load configuration from defaults, environment and a YAML file.
"""
from .config import (
    ResearchAgentConfig,
    CoinGeckoConfig,
    LLMConfig,
    ReportConfig,
    LoggingConfig,
    DEFAULT_ENV_PREFIX,
    load_config,
)

__all__ = [
    "ResearchAgentConfig",
    "CoinGeckoConfig",
    "LLMConfig",
    "ReportConfig",
    "LoggingConfig",
    "DEFAULT_ENV_PREFIX",
    "load_config",
]
