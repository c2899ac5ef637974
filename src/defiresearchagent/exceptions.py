"""
Custom exceptions for the DeFi Research Agent.

This module defines the exception hierarchy used by the configuration layer,
the data source adapters and the report composer. Adapters never let these
escape their boundary (they are converted into ``ErrorRecord`` values), but
they carry the context that ends up in the logs.
"""

from typing import Optional, Any, Dict

import httpx
from pydantic import ValidationError


class ResearchAgentError(Exception):
    """
    Base exception for all DeFi Research Agent errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context information
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

# Configuration Related Errors

class ConfigurationError(ResearchAgentError):
    """Raised when there's an issue with configuration."""
    pass

class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration values are invalid."""
    pass

class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, missing_key: str, section: Optional[str] = None):
        message = f"Missing required configuration: {missing_key}"
        if section:
            message = f"Missing required configuration in section '{section}': {missing_key}"

        super().__init__(
            message=message,
            context={"missing_key": missing_key, "section": section}
        )

# Source Related Errors

class SourceError(ResearchAgentError):
    """Raised inside a data source adapter when a fetch or normalization fails."""

    def __init__(self,
                 source: str,
                 message: str,
                 context: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        context = context or {}
        context["source"] = source
        super().__init__(f"[{source}] {message}", context=context, cause=cause)
        self.source = source

class SourceTimeoutError(SourceError):
    """Raised when a data source does not answer in time."""

    def __init__(self,
                 source: str,
                 timeout_seconds: Optional[float] = None,
                 cause: Optional[Exception] = None):
        message = "Timed out"
        if timeout_seconds is not None:
            message = f"Timed out after {timeout_seconds}s"

        super().__init__(
            source,
            message,
            context={"timeout_seconds": timeout_seconds},
            cause=cause
        )
        self.timeout_seconds = timeout_seconds

# Report Related Errors

class ReportCompositionError(ResearchAgentError):
    """Raised when a record handed to the composer cannot be rendered."""

    def __init__(self, section: str, message: str, cause: Optional[Exception] = None):
        super().__init__(
            message=f"{section}: {message}",
            context={"section": section},
            cause=cause
        )
        self.section = section


def handle_exception(
    exception: Exception,
    source: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> ResearchAgentError:
    """
    Convert a generic exception to an appropriate ResearchAgentError.

    Args:
        exception: The original exception
        source: Optional source adapter name for context
        context: Additional context information

    Returns:
        Appropriate ResearchAgentError subclass
    """
    context = context or {}

    if isinstance(exception, ResearchAgentError):
        exception.context.update(context)
        if source:
            exception.context.setdefault("source", source)
        return exception

    if isinstance(exception, (TimeoutError, httpx.TimeoutException)):
        return SourceTimeoutError(
            source or "unknown", context.get("timeout_seconds"), cause=exception
        )

    if isinstance(exception, ValidationError):
        if source:
            return SourceError(source, f"Payload validation error: {exception}", context=context, cause=exception)
        return ReportCompositionError("input", f"Record validation error: {exception}", cause=exception)

    if isinstance(exception, ValueError) and not source:
        return ConfigurationError(
            message=f"Configuration validation error: {exception}",
            context=context,
            cause=exception
        )

    if source:
        return SourceError(source, f"Unexpected error: {exception}", context=context, cause=exception)

    return ResearchAgentError(
        message=f"Unexpected error: {exception}",
        context=context,
        cause=exception
    )
