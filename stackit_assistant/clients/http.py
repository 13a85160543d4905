"""
Thin async HTTP wrapper shared by the backend clients.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """
    httpx.AsyncClient with retries on transport errors.
    
    HTTP error statuses are returned to the caller untouched; only
    connection-level failures are retried.
    """
    
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_attempts: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None
    
    async def __aenter__(self):
        self._ensure_client()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
    
    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            )
        return self.client
    
    async def aclose(self):
        if self.client is not None:
            await self.client.aclose()
            self.client = None
    
    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        client = self._ensure_client()
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True
        ):
            with attempt:
                return await client.request(method, path, json=json, headers=headers)
    
    async def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        return await self.request("GET", path, headers=headers)
    
    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        return await self.request("POST", path, json=json, headers=headers)


def build_headers(auth_token: Optional[str] = None) -> Dict[str, str]:
    """JSON headers, with a bearer token when one is given."""
    headers = {"Content-Type": "application/json"}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


def error_message(response: httpx.Response, default: str) -> str:
    """Extract the backend's `message` field from an error response."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default
