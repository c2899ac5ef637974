"""
Core components of the DeFi Research Agent.
"""
from .logging_config import setup_logging, create_module_filter, format_record

__all__ = [
    "setup_logging",
    "create_module_filter",
    "format_record",
]
