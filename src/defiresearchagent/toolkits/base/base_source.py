from __future__ import annotations

"""Base Source Helper Class
==========================

Shared plumbing for every data source adapter:

- HTTP client construction (``DataHTTPClient``) for adapters that call out
- the adapter error boundary: nothing raised inside a fetch escapes, it is
  logged and turned into an ``ErrorRecord``
- timestamp helpers

Adapters inherit from this class and wrap each public fetch with
:meth:`_guarded`.
"""

import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from loguru import logger

from defiresearchagent.exceptions import SourceTimeoutError, handle_exception
from defiresearchagent.reports.models import ErrorRecord

__all__ = ["BaseSource"]


class BaseSource:
    """Helper base class for source adapters.

    Example:
        ```python
        class MySource(BaseSource):
            source_name = "my_source"

            async def fetch(self, token_name: str):
                return await self._guarded(
                    "Unable to fetch my data", self._fetch, token_name, identifier=token_name
                )
        ```
    """

    source_name: str = "source"

    _http_client = None
    _http_timeout: Optional[float] = None

    def _init_http_client(
        self,
        http_timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        rate_limit: Optional[float] = None,
    ) -> None:
        """Create the adapter's HTTP client with standard settings."""
        from defiresearchagent.toolkits.utils import DataHTTPClient

        self._http_client = DataHTTPClient(
            default_timeout=http_timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            default_rate_limit=rate_limit,
        )
        self._http_timeout = http_timeout
        logger.debug(
            f"[{self.source_name}] HTTP client ready: timeout={http_timeout}s, retries={max_retries}"
        )

    async def _guarded(
        self,
        error_summary: str,
        operation: Callable[..., Awaitable[Any]],
        *args: Any,
        identifier: Optional[str] = None,
    ) -> Union[Any, ErrorRecord]:
        """Run ``operation`` and convert any failure into an ``ErrorRecord``.

        Args:
            error_summary: Fixed ``error`` text for the ErrorRecord
            operation: Coroutine function performing the fetch + normalization
            *args: Arguments for ``operation``
            identifier: Asset identifier, for logging only

        Returns:
            The operation's record, or an ErrorRecord whose ``details`` carry the
            original exception message (the timeout notice for timeouts)
        """
        started = time.monotonic()
        try:
            result = await operation(*args)
        except Exception as e:
            context: Dict[str, Any] = {"identifier": identifier}
            if self._http_timeout is not None:
                context["timeout_seconds"] = self._http_timeout

            error = handle_exception(e, source=self.source_name, context=context)
            logger.error(f"{error_summary} ({identifier}): {error.message}")
            if isinstance(error, SourceTimeoutError):
                return ErrorRecord.from_exception(error_summary, error)
            return ErrorRecord.from_exception(error_summary, error.cause or e)

        logger.debug(
            f"[{self.source_name}] fetched {identifier} in {time.monotonic() - started:.2f}s"
        )
        return result

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(timezone.utc)

    async def aclose(self) -> None:
        """Release the HTTP client, if this adapter created one."""
        if self._http_client is not None:
            await self._http_client.aclose()
