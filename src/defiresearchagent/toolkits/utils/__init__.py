"""
Utility modules for the data source adapters.

- DataHTTPClient: async HTTP client with retry logic and rate limiting
- DataValidator: structural validation of provider payloads
"""

from .data_validator import DataValidator
from .http_client import DataHTTPClient, HTTPClientError

__all__ = [
    'DataValidator',
    'DataHTTPClient',
    'HTTPClientError',
]
