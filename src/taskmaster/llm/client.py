# src/taskmaster/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """The generation endpoint did not produce usable text."""


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError)):
        return True
    return exc.__class__.__name__ in {"TimeoutError", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible endpoints answer 404 for unknown models
    return isinstance(exc, openai.NotFoundError)


def describe_generation_error(exc: Exception) -> str:
    """Short, secret-free reason used in GenerationError messages and logs."""
    if _is_auth_error(exc):
        return "authentication failed (check GEMINI_API_KEY)"
    if _is_rate_limit_error(exc):
        return "rate-limited"
    if _is_connection_error(exc):
        return "network/timeout error"
    if _is_not_found_error(exc):
        return "model not available"
    return exc.__class__.__name__


def make_timeout(settings: Settings) -> httpx.Timeout:
    connect_s = float(settings.llm_connect_timeout_seconds)
    # keep read >= connect as a sane baseline
    read_s = max(float(settings.llm_timeout_seconds), connect_s)
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


class OpenAICompatibleGenerator:
    """
    One-shot text generation against an OpenAI-compatible chat-completions endpoint
    (Gemini's compatibility layer by default).

    Every call either returns non-empty text or raises GenerationError.
    Automatic retries are disabled: the caller owns the fallback policy.
    """

    def __init__(self, settings: Settings, *, client: Any | None = None) -> None:
        if client is None:
            if not settings.api_key:
                raise RuntimeError("Generation API key is not set. Set GEMINI_API_KEY in your .env.")
            if not settings.api_base_url.strip():
                raise RuntimeError("Generation base URL is not set. Set TASKMASTER_API_BASE_URL in your .env.")
            client = AsyncOpenAI(
                base_url=settings.api_base_url,
                api_key=settings.api_key,
                timeout=make_timeout(settings),
                max_retries=0,
            )
        self._client = client
        self._model = settings.llm_model
        self._top_p = float(settings.llm_top_p)
        self._top_k = int(settings.llm_top_k)
        self._max_tokens = int(settings.llm_max_output_tokens)
        self._timeout = make_timeout(settings)

    async def aclose(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            await close()

    def _request_kwargs(self, prompt: str, temperature: float) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": float(temperature),
            "top_p": self._top_p,
            "max_tokens": self._max_tokens,
            "timeout": self._timeout,
        }
        if self._top_k > 0:
            kwargs["extra_body"] = {"top_k": self._top_k}
        return kwargs

    async def generate(self, prompt: str, *, temperature: float = 0.7) -> str:
        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(**self._request_kwargs(prompt, temperature))
        except Exception as e:
            reason = describe_generation_error(e)
            logger.info("Generation call failed model=%s (%s)", self._model, reason)
            raise GenerationError(f"Generation failed: {reason}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise GenerationError("No response generated (zero candidates)")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if not content or not str(content).strip():
            raise GenerationError("No response generated (empty candidate)")

        logger.debug("Generation ok model=%s (%.2fs)", self._model, time.monotonic() - t0)
        return str(content)
