"""
AI gateway client — thin async wrapper over an OpenAI-compatible
`/chat/completions` endpoint.

Status mapping (no retries, one request per call):
  429            → OracleRateLimitedError
  402            → OracleQuotaExhaustedError
  other non-2xx  → OracleUnavailableError
  transport err  → OracleUnavailableError
  non-JSON body  → InvalidOracleResponse

Callers own the parsing of `choices[0].message` into their own schema.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from critiquelab.core.config import settings
from critiquelab.core.errors import (
    InvalidOracleResponse,
    OracleQuotaExhaustedError,
    OracleRateLimitedError,
    OracleUnavailableError,
    ServiceNotConfiguredError,
)

logger = logging.getLogger(__name__)


class AIGatewayClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key or settings.AI_GATEWAY_API_KEY
        if not self.api_key:
            raise ValueError("AI_GATEWAY_API_KEY is not configured")
        self.base_url = base_url or settings.AI_GATEWAY_URL
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.AI_GATEWAY_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def chat(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        **extra: Any,
    ) -> Dict[str, Any]:
        """POST one chat completion and return the first choice's message."""
        payload: Dict[str, Any] = {"model": model, "messages": messages, **extra}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            r = await self._client.post(self.base_url, headers=headers, json=payload)
        except httpx.RequestError as net_err:
            logger.error("AI gateway transport error: %s", net_err)
            raise OracleUnavailableError() from net_err

        if r.status_code == 429:
            raise OracleRateLimitedError()
        if r.status_code == 402:
            raise OracleQuotaExhaustedError()
        if r.is_error:
            logger.error(
                "AI gateway error: status=%s, body=%s", r.status_code, r.text[:200]
            )
            raise OracleUnavailableError(upstream_status=r.status_code)

        try:
            data = r.json()
        except ValueError as err:
            raise InvalidOracleResponse("gateway body is not JSON") from err
        try:
            return data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as err:
            raise InvalidOracleResponse("gateway response has no choices") from err

    async def aclose(self) -> None:
        await self._client.aclose()


def get_gateway(request: Request) -> AIGatewayClient:
    """Dependency: the process-wide client, or 503 when no key is configured."""
    gateway: Optional[AIGatewayClient] = getattr(request.app.state, "gateway", None)
    if gateway is None:
        logger.error("AI_GATEWAY_API_KEY is not configured")
        raise ServiceNotConfiguredError()
    return gateway
