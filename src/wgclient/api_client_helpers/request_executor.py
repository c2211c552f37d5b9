"""Request execution for the wg-easy REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..http_session import HttpSessionManager
from ..network_errors import REQUEST_ERROR_TYPES, is_network_unreachable_error, to_network_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseEnvelope:
    """Fully-read HTTP response, detached from the connection."""

    status: int
    body: bytes
    content_type: str = ""

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class RequestExecutor:
    """
    Sends one HTTP request and reads the whole body.

    Transport failures become ``NetworkError``; HTTP status interpretation is
    left to the caller. There are no retries here.
    """

    def __init__(self, session_manager: HttpSessionManager) -> None:
        self._session_manager = session_manager

    async def execute(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Any] = None,
    ) -> ResponseEnvelope:
        session = await self._session_manager.initialize()
        request_kwargs: Dict[str, Any] = {"headers": headers or {}}
        if json is not None:
            request_kwargs["json"] = json

        logger.debug("Making %s request for %s", method, operation)
        try:
            async with session.request(method, url, **request_kwargs) as response:
                body = await response.read()
                return ResponseEnvelope(response.status, body, response.content_type)
        except REQUEST_ERROR_TYPES as exc:
            if is_network_unreachable_error(exc):
                logger.warning("Server unreachable during %s: %s", operation, type(exc).__name__)
            else:
                logger.warning("Request %s failed: %s", operation, type(exc).__name__)
            raise to_network_error(exc, operation=operation) from exc
