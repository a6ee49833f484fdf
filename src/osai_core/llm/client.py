# src/osai_core/llm/client.py

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import get_settings
from ..core.errors import MissingCredentialError, NotifierError, NotifierErrorKind
from ..core.ports import Sleeper

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt `attempt` (0-based): 1, 2, 4, ..."""
    return float(2 ** max(0, int(attempt)))


def build_payload(query: str, system_instruction: str) -> dict[str, Any]:
    """generateContent body with Google Search grounding enabled."""
    return {
        "contents": [{"parts": [{"text": query}]}],
        "tools": [{"google_search": {}}],
        "systemInstruction": {"parts": [{"text": system_instruction}]},
    }


def extract_text(data: Any) -> str | None:
    """Return candidates[0].content.parts[0].text, or None if absent."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def friendly_notifier_error_message(err: Exception) -> str:
    if isinstance(err, NotifierError):
        if err.kind == NotifierErrorKind.MISSING_CREDENTIAL:
            return "AI is not configured (missing API key). Set GEMINI_API_KEY in .env (see config.example.py)."
        if err.kind == NotifierErrorKind.MALFORMED_RESPONSE:
            return "AI returned a response without text. Try again or rephrase the query."
        if err.kind == NotifierErrorKind.EXHAUSTED:
            return f"AI is unavailable right now ({err.detail or 'unknown error'}). Try again later."
    return str(err).strip() or "AI error."


class GeminiClient:
    """
    Gemini generateContent client with bounded retries.

    Behavior:
    - No API key -> MissingCredentialError, no network call.
    - HTTP 2xx without candidate text -> MALFORMED_RESPONSE (not retried).
    - HTTP error status / network error -> retry after backoff_delay(attempt);
      after the last attempt -> EXHAUSTED with the last status or cause.

    The sleeper is injectable so tests can observe backoff without waiting.
    """

    def __init__(
        self,
        settings: Any = None,
        *,
        api_key: str | None = None,
        max_attempts: int | None = None,
        sleep: Sleeper = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if settings is None:
            settings = get_settings()

        self._api_key = api_key if api_key is not None else getattr(settings, "gemini_api_key", None)
        base_url = str(getattr(settings, "gemini_base_url", "https://generativelanguage.googleapis.com/v1beta"))
        model = str(getattr(settings, "gemini_model", "gemini-2.5-flash-preview-09-2025"))
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._system_instruction = str(getattr(settings, "system_instruction", ""))
        self._max_attempts = max(
            1, int(max_attempts or getattr(settings, "llm_max_attempts", DEFAULT_MAX_ATTEMPTS))
        )
        self._sleep = sleep
        self._transport = transport

        connect_s = float(getattr(settings, "llm_connect_timeout_seconds", 5.0))
        read_s = float(getattr(settings, "llm_read_timeout_seconds", 30.0))
        self._timeout = httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)

        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create and cache the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(self, query: str) -> str:
        if not self._api_key or not str(self._api_key).strip():
            raise MissingCredentialError(
                "GEMINI_API_KEY environment variable not set. Please set your API key."
            )

        payload = build_payload(query, self._system_instruction)
        headers = {"x-goog-api-key": str(self._api_key)}
        client = self._get_client()

        last_detail = "no attempts made"

        for attempt in range(self._max_attempts):
            try:
                response = await client.post(self._url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                last_detail = f"{e.__class__.__name__}: {e}"
                logger.warning("Gemini network error (attempt %d/%d): %s", attempt + 1, self._max_attempts, last_detail)
            else:
                if response.is_success:
                    try:
                        data = response.json()
                    except ValueError as e:
                        raise NotifierError(
                            NotifierErrorKind.MALFORMED_RESPONSE,
                            "API response is not valid JSON.",
                        ) from e
                    text = extract_text(data)
                    if text is None:
                        raise NotifierError(
                            NotifierErrorKind.MALFORMED_RESPONSE,
                            "API response format error: missing text content.",
                        )
                    logger.debug("Gemini: completed on attempt %d (%d chars)", attempt + 1, len(text))
                    return text

                last_detail = f"HTTP {response.status_code}"
                logger.warning(
                    "Gemini API error (attempt %d/%d): status=%s body=%s",
                    attempt + 1,
                    self._max_attempts,
                    response.status_code,
                    response.text[:500],
                )

            if attempt + 1 < self._max_attempts:
                delay = backoff_delay(attempt)
                logger.info("Gemini: retrying in %.0fs", delay)
                await self._sleep(delay)

        raise NotifierError(
            NotifierErrorKind.EXHAUSTED,
            f"Gemini API failed after {self._max_attempts} attempts ({last_detail}).",
            detail=last_detail,
        )
