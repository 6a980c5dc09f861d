"""
Base class for clients of the AI-advice proxy.

The proxy is a single POST endpoint resolved via config.get_advice_endpoint().
Any transport error, non-success status or unusable body is turned into a
static "feature unavailable" answer; nothing raised here reaches the caller.
"""
import time
import logging
from typing import Any

import httpx

from config import Settings, settings as default_settings
from errors import AdviceUnavailableError

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "Sorry, the expert advice feature is temporarily unavailable. "
    "Please try again later."
)


class BaseAgent:
    agent_type: str = "base"

    def __init__(self, config: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or default_settings
        self.endpoint = self.config.get_advice_endpoint()
        self.client = client

    async def process(self, payload: Any) -> dict:
        """
        Ask the endpoint about `payload`.
        Returns {"available", "advice", "message", "latency_ms"}.
        """
        start_time = time.time()

        if self.config.mock_advice:
            result = await self._mock_process(payload)
        else:
            try:
                data = await self._post(self._build_request(payload))
                result = {"available": True, "advice": self._parse_response(data), "message": None}
            except (httpx.HTTPError, ValueError, AdviceUnavailableError) as e:
                logger.error(f"Advice call failed: {e}")
                result = {"available": False, "advice": None, "message": UNAVAILABLE_MESSAGE}

        result["latency_ms"] = int((time.time() - start_time) * 1000)
        return result

    async def _post(self, body: dict) -> Any:
        if self.client is not None:
            return await self._send(self.client, body)
        async with httpx.AsyncClient(timeout=self.endpoint.timeout) as client:
            return await self._send(client, body)

    async def _send(self, client: httpx.AsyncClient, body: dict) -> Any:
        resp = await client.post(self.endpoint.url, json=body)
        if resp.status_code >= 400:
            try:
                err = resp.json()
                detail = err.get("error") if isinstance(err, dict) else None
            except ValueError:
                detail = None
            raise AdviceUnavailableError(detail or f"Server error: {resp.status_code} {resp.reason_phrase}")
        return resp.json()

    def _build_request(self, payload: Any) -> dict:
        return {"product": payload}

    def _parse_response(self, data: Any) -> Any:
        return data

    async def _mock_process(self, payload: Any) -> dict:
        """Override in subclasses for mock responses."""
        return {"available": False, "advice": None, "message": "Mock advice not implemented for this agent."}
