"""
Configuration system for the DeFi Research Agent.

Settings can come from:
- Built-in defaults
- Environment variables (a ``.env`` file is honoured through python-dotenv)
- YAML files
- Python dictionaries

``load_config`` applies them in that order; later sources win, but only for
the values they actually set.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from defiresearchagent.exceptions import InvalidConfigurationError
from defiresearchagent.reports.composer import ReportOptions

DEFAULT_ENV_PREFIX = "DEFI_RESEARCH_"


class CoinGeckoConfig(BaseModel):
    """Configuration for the CoinGecko market and project source."""
    api_key: Optional[str] = Field(default_factory=lambda: os.getenv("COINGECKO_API_KEY"))
    base_url: Optional[str] = None  # Pro URL when api_key is set, public URL otherwise
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    rate_limit: Optional[float] = None  # Minimum seconds between requests

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("max_retries cannot be negative")
        if v > 10:
            logger.warning(f"High retry count ({v}) may stall report generation")
        return v

    @field_validator("retry_delay", "rate_limit")
    @classmethod
    def validate_non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("delays cannot be negative")
        return v


class LLMConfig(BaseModel):
    """Configuration for the LLM behind the conversational agent."""
    model_config = ConfigDict(protected_namespaces=())

    provider: str = "litellm"
    model_id: str = "openai/gpt-4o-mini"
    temperature: float = 0.3
    max_tokens: Optional[int] = None
    api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    api_base: Optional[str] = None

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v):
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v):
        if v.lower() != "litellm":
            raise ValueError(f"Unsupported LLM provider '{v}'; only 'litellm' is available")
        return v.lower()


class ReportConfig(BaseModel):
    """Defaults for report generation."""
    include_news: bool = True
    include_sentiment: bool = True
    news_lookback_days: int = 7
    description_max_length: int = 500
    max_explorer_links: int = 3

    @field_validator("news_lookback_days", "description_max_length")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("max_explorer_links")
    @classmethod
    def validate_explorer_links(cls, v):
        if v < 0:
            raise ValueError("max_explorer_links cannot be negative")
        return v

    def to_options(self) -> ReportOptions:
        """Rendering options for the report composer."""
        return ReportOptions(
            description_max_length=self.description_max_length,
            max_explorer_links=self.max_explorer_links,
        )


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    file_path: Optional[str] = None  # Defaults to logs/defi_research.log
    file_rotation: str = "10 MB"
    file_retention: int = 3
    enable_console: bool = True
    enable_file: bool = False
    module_levels: Optional[Dict[str, str]] = None
    console_style: str = "clean"  # "clean", "timestamp", or "detailed"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("console_style")
    @classmethod
    def validate_console_style(cls, v):
        valid_styles = ["clean", "timestamp", "detailed"]
        if v.lower() not in valid_styles:
            raise ValueError(f"console_style must be one of: {valid_styles}")
        return v.lower()

    def get_log_file_path(self) -> Path:
        """Get the log file path."""
        if self.file_path:
            return Path(self.file_path)
        return Path("logs") / "defi_research.log"


class ResearchAgentConfig(BaseModel):
    """Main configuration for the DeFi Research Agent."""

    coingecko: CoinGeckoConfig = Field(default_factory=CoinGeckoConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ResearchAgentConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            ResearchAgentConfig instance

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in configuration file {path}: {e}")
            raise

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"Configuration file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )

        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX) -> "ResearchAgentConfig":
        """
        Load configuration from environment variables.

        Only variables that are present end up as explicitly set values, so
        the result can be merged over other sources without resetting them.

        Args:
            prefix: Prefix for environment variables (default: "DEFI_RESEARCH_")

        Returns:
            ResearchAgentConfig instance with values from environment
        """
        env_mappings = {
            f"{prefix}COINGECKO_API_KEY": ("coingecko", "api_key", str),
            f"{prefix}COINGECKO_BASE_URL": ("coingecko", "base_url", str),
            f"{prefix}COINGECKO_TIMEOUT": ("coingecko", "timeout", float),
            f"{prefix}COINGECKO_MAX_RETRIES": ("coingecko", "max_retries", int),
            f"{prefix}COINGECKO_RATE_LIMIT": ("coingecko", "rate_limit", float),
            f"{prefix}LLM_MODEL": ("llm", "model_id", str),
            f"{prefix}LLM_TEMPERATURE": ("llm", "temperature", float),
            f"{prefix}LLM_API_KEY": ("llm", "api_key", str),
            f"{prefix}LLM_API_BASE": ("llm", "api_base", str),
            f"{prefix}INCLUDE_NEWS": ("report", "include_news", _parse_bool),
            f"{prefix}INCLUDE_SENTIMENT": ("report", "include_sentiment", _parse_bool),
            f"{prefix}NEWS_DAYS": ("report", "news_lookback_days", int),
            f"{prefix}LOG_LEVEL": ("logging", "level", str),
            f"{prefix}LOG_FILE": ("logging", "file_path", str),
            f"{prefix}LOG_TO_FILE": ("logging", "enable_file", _parse_bool),
        }

        data: Dict[str, Dict[str, Any]] = {}
        for env_var, (section, key, convert) in env_mappings.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                data.setdefault(section, {})[key] = convert(value)
                logger.debug(f"Set config from {env_var}: {section}.{key}")
            except ValueError as e:
                logger.warning(f"Failed to set config from {env_var}: {e}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResearchAgentConfig":
        """
        Create configuration from a dictionary.

        Raises:
            InvalidConfigurationError: If a value fails validation
        """
        try:
            return cls(**data)
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid configuration: {e}", cause=e) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump(exclude_none=True)

    def merge_with(self, other: "ResearchAgentConfig") -> "ResearchAgentConfig":
        """
        Merge this configuration with another, with other's explicitly set values taking precedence.

        Args:
            other: Another ResearchAgentConfig to merge with

        Returns:
            New ResearchAgentConfig with merged values
        """
        def deep_merge(base: dict, overlay: dict) -> dict:
            result = base.copy()
            for key, value in overlay.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        merged = deep_merge(self.model_dump(), other.model_dump(exclude_unset=True))
        return ResearchAgentConfig.from_dict(merged)

    def validate_api_keys(self) -> List[str]:
        """
        List the API keys that are missing for the configured features.

        The CoinGecko key is optional (public API) and never reported.
        """
        missing_keys = []
        if not self.llm.api_key:
            missing_keys.append("LLM API key")
        return missing_keys

    def setup_logging(self) -> None:
        """Configure logging based on the current settings."""
        from ..core.logging_config import setup_logging, create_module_filter

        console_filter = None
        if self.logging.module_levels:
            console_filter = create_module_filter(self.logging.module_levels)

        setup_logging(self.logging, console_filter)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    use_env: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    setup_logging: bool = True,
) -> ResearchAgentConfig:
    """
    Load configuration using the standard precedence:
    1. Default configuration
    2. Environment variables (if use_env=True)
    3. Configuration file (if provided)

    Args:
        config_file: Optional path to YAML configuration file
        use_env: Whether to load from environment variables (and ``.env``)
        env_prefix: Prefix for environment variables
        setup_logging: Whether to install the configured log sinks

    Returns:
        ResearchAgentConfig instance
    """
    if use_env:
        load_dotenv()

    config = ResearchAgentConfig()

    if use_env:
        config = config.merge_with(ResearchAgentConfig.from_env(env_prefix))

    if config_file:
        config = config.merge_with(ResearchAgentConfig.from_yaml(config_file))

    if setup_logging:
        config.setup_logging()

    missing_keys = config.validate_api_keys()
    if missing_keys:
        logger.debug(f"Missing API keys: {', '.join(missing_keys)}")

    return config
