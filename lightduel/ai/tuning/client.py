"""
Gemini API Client

Thin async wrapper around the Gemini API used by the opponent tuner.

Requires GEMINI_API_KEY environment variable (or an explicit api_key).
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

import httpx


logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Result from a generation call."""
    text: str
    model: str
    total_tokens: int
    latency_ms: float


class TuningError(Exception):
    """Base exception for opponent tuning failures."""
    pass


class TuningClientError(TuningError):
    """Raised for transport-level failures (timeouts, connection errors)."""
    pass


class TuningRateLimitError(TuningClientError):
    """Raised when rate limited by the API."""
    pass


class TuningAPIError(TuningClientError):
    """Raised for API errors."""
    def __init__(self, message: str, status_code: int, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class TuningClient:
    """
    Async client for the Gemini generateContent endpoint.

    Usage:
        async with TuningClient() as client:
            result = await client.generate(system="...", user="...")
            print(result.text)
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key. Defaults to GEMINI_API_KEY env var.
            model: Model to use. Defaults to gemini-2.0-flash.
            max_retries: Maximum attempts for transient errors.
            retry_delay: Base delay between retries (exponential backoff).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. MockTransport in tests).
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY environment variable not set. "
                "Get an API key from https://aistudio.google.com/app/apikey"
            )

        self.model = model or self.DEFAULT_MODEL
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._request_count = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_url(self) -> str:
        return f"{self.BASE_URL}/models/{self.model}:generateContent?key={self.api_key}"

    def _build_request_body(
        self,
        system: str,
        user: str,
        temperature: float,
        max_tokens: int,
    ) -> dict:
        """Build the request body, asking for a JSON reply."""
        return {
            "system_instruction": {
                "parts": [{"text": system}]
            },
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": user}]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def generate(
        self,
        system: str,
        user: str,
        temperature: float = 0.4,
        max_tokens: int = 256,
    ) -> GenerationResult:
        """
        Generate a response.

        Raises:
            TuningRateLimitError: If rate limited after retries.
            TuningAPIError: For other API errors.
            TuningClientError: For timeouts and connection errors after retries.
        """
        client = await self._get_client()
        url = self._build_url()
        body = self._build_request_body(system, user, temperature, max_tokens)

        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                start_time = time.perf_counter()
                response = await client.post(url, json=body)
                latency_ms = (time.perf_counter() - start_time) * 1000

                if response.status_code == 200:
                    return self._parse_response(response, latency_ms)

                elif response.status_code == 429:
                    delay = self.retry_delay * (2 ** attempt)
                    logger.warning(f"Rate limited, retrying in {delay:.1f}s (attempt {attempt + 1})")
                    await asyncio.sleep(delay)
                    last_error = TuningRateLimitError("Rate limited by tuning API")

                elif response.status_code >= 500:
                    delay = self.retry_delay * (2 ** attempt)
                    logger.warning(f"Server error {response.status_code}, retrying in {delay:.1f}s")
                    await asyncio.sleep(delay)
                    last_error = TuningAPIError(
                        f"Server error: {response.status_code}",
                        response.status_code,
                        response.text,
                    )

                else:
                    # Client error - don't retry
                    raise TuningAPIError(
                        f"API error: {response.status_code}",
                        response.status_code,
                        response.text,
                    )

            except httpx.TimeoutException:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(f"Request timeout, retrying in {delay:.1f}s (attempt {attempt + 1})")
                await asyncio.sleep(delay)
                last_error = TuningClientError("Request timed out")

            except httpx.RequestError as e:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(f"Request error: {e}, retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                last_error = TuningClientError(f"Request error: {e}")

        if last_error:
            raise last_error
        raise TuningClientError("Failed after all retries")

    def _parse_response(self, response: httpx.Response, latency_ms: float) -> GenerationResult:
        """
        Parse a 200 response into a GenerationResult.

        Raises:
            TuningAPIError: If the body is not JSON or lacks a text part
        """
        try:
            data = response.json()
        except ValueError as e:
            raise TuningAPIError(f"Response body is not JSON: {e}", 200, response.text) from e

        if not isinstance(data, dict):
            raise TuningAPIError("Response body is not a JSON object", 200, response.text)

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise TuningAPIError("No candidates in response", 200, response.text)

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts:
            raise TuningAPIError("No parts in response", 200, response.text)

        text = parts[0].get("text") if isinstance(parts[0], dict) else None
        if not isinstance(text, str):
            raise TuningAPIError("First part has no text", 200, response.text)

        usage = data.get("usageMetadata")
        total_tokens = usage.get("totalTokenCount", 0) if isinstance(usage, dict) else 0
        self._request_count += 1

        return GenerationResult(
            text=text,
            model=self.model,
            total_tokens=total_tokens,
            latency_ms=latency_ms,
        )

    @property
    def request_count(self) -> int:
        """Total number of successful requests made."""
        return self._request_count
