"""LiteLLM adapter implementing the CompletionProvider interface.

Routes tutor requests to the hosted model via LiteLLM's unified API.
Handles web-grounding tool use, grounding citation extraction, structured
output parsing, timeouts, and retry with exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import AsyncIterator
from typing import Any

import litellm
from pydantic import BaseModel, ValidationError

# Suppress LiteLLM's "Give Feedback / Get Help" and "Provider List" banners
litellm.suppress_debug_info = True

from tutorcenter.errors import (
    MalformedResponse,
    ProviderRequestError,
    ProviderStreamError,
    TutorError,
)
from tutorcenter.providers.base import CompletionProvider
from tutorcenter.providers.citations import extract_citations
from tutorcenter.schemas.request import PromptRequest
from tutorcenter.schemas.settings import ProviderSettings
from tutorcenter.schemas.streaming import Fragment
from tutorcenter.schemas.translation import TranslationResult

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error: "

# Gemini's web search tool, passed through by LiteLLM
_WEB_GROUNDING_TOOL = {"googleSearch": {}}

_BASE_BACKOFF = 1.0  # seconds

# A whole response wrapped in a ```json fence
_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*\n(.*?)\n?```$", re.DOTALL)

_RETRYABLE_ERRORS = (
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
    litellm.APIConnectionError,
)


def _short_error_reason(error: Exception) -> str:
    """Extract a short, user-friendly reason from a LiteLLM error.

    Maps error types and status codes to concise descriptions instead
    of dumping full JSON error payloads.
    """
    error_str = str(error).lower()
    if "rate" in error_str or "429" in error_str:
        return "rate limit"
    if "overloaded" in error_str or "529" in error_str:
        return "overloaded"
    if "timeout" in error_str or isinstance(error, TimeoutError):
        return "timeout"
    if "503" in error_str or "unavailable" in error_str:
        return "service unavailable"
    if "500" in error_str or "internal" in error_str:
        return "server error"
    if "connection" in error_str:
        return "connection error"
    # Fallback: first 80 chars of the error
    return str(error)[:80]


def parse_structured(content: str, schema: type[BaseModel]) -> BaseModel:
    """Parse response text as JSON conforming to ``schema``.

    A response wrapped in a single ```json fence is unwrapped first.

    Raises:
        MalformedResponse: If the text is empty, not JSON, or fails validation.
    """
    text = content.strip()
    fence = _JSON_FENCE_RE.match(text)
    if fence:
        text = fence.group(1).strip()
    if not text:
        raise MalformedResponse("empty response body")

    try:
        return schema.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Structured output failed validation against %s", schema.__name__)
        raise MalformedResponse(str(e)) from e


async def _release(response: Any) -> None:
    """Close a provider stream so the connection is not left open."""
    aclose = getattr(response, "aclose", None)
    if aclose is None:
        return
    try:
        result = aclose()
        if asyncio.iscoroutine(result):
            await result
    except Exception:
        logger.debug("Error while closing provider stream", exc_info=True)


class LiteLLMProvider(CompletionProvider):
    """Completion client powered by LiteLLM.

    One instance is built at startup and shared by every request; the
    settings it holds are immutable and calls keep no per-request state
    on the instance.
    """

    async def _stream(
        self, request: PromptRequest, api_key: str
    ) -> AsyncIterator[Fragment]:
        """Yield one Fragment per provider chunk, ending with an error Fragment on failure."""
        kwargs = self._build_completion_kwargs(request, api_key)
        kwargs["stream"] = True

        response = None
        try:
            response = await self._call_with_retry(kwargs, ProviderStreamError)
            chunk_count = 0
            async for chunk in response:
                chunk_count += 1
                yield self._to_fragment(chunk)
            logger.debug(
                "Stream from %s finished after %d chunks", self.display_name, chunk_count
            )
        except Exception as e:
            message = str(e) if isinstance(e, TutorError) else _short_error_reason(e)
            logger.warning("Stream from %s failed: %s", self.display_name, message)
            yield Fragment(text=f"{ERROR_PREFIX}{message}", is_error=True)
        finally:
            if response is not None:
                await _release(response)

    async def complete_structured(
        self,
        request: PromptRequest,
        schema: type[BaseModel] = TranslationResult,
    ) -> BaseModel:
        """Send one JSON-mode request via LiteLLM and parse it into ``schema``.

        Raises:
            ConfigurationError: If no API key is configured.
            ProviderRequestError: If the call fails after all retries.
            MalformedResponse: If the response text does not match ``schema``.
        """
        api_key = self._require_api_key()
        kwargs = self._build_completion_kwargs(request, api_key, output_schema=schema)

        response = await self._call_with_retry(kwargs, ProviderRequestError)
        content = self._extract_content(response)
        return parse_structured(content, schema)

    def _build_completion_kwargs(
        self,
        request: PromptRequest,
        api_key: str,
        output_schema: type[BaseModel] | None = None,
    ) -> dict:
        """Build the kwargs dict for litellm.acompletion."""
        kwargs: dict = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.prompt},
            ],
            "timeout": float(self._settings.timeout),
            "api_key": api_key,
        }

        if self._settings.api_base:
            kwargs["api_base"] = self._settings.api_base

        # Omitted entirely when off, not sent as an empty list
        if request.use_web_grounding:
            kwargs["tools"] = [_WEB_GROUNDING_TOOL]

        schema = output_schema or request.output_schema
        if schema is not None:
            kwargs["response_format"] = schema

        return kwargs

    async def _call_with_retry(
        self, kwargs: dict, error_cls: type[TutorError]
    ) -> Any:
        """Call litellm.acompletion with exponential backoff retry.

        Retries on transient errors (rate limits, server errors, timeouts).
        Non-retryable errors (auth, invalid request, not found) are raised
        immediately. The provider exception is kept as ``__cause__``.

        Raises:
            error_cls: If the call fails, after all retries for transient errors.
        """
        max_retries = self._settings.max_retries
        last_error: Exception | None = None

        for attempt in range(max_retries):
            try:
                return await litellm.acompletion(**kwargs)
            except (TimeoutError, litellm.Timeout):
                last_error = TimeoutError(
                    f"timed out after {kwargs.get('timeout')}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
            except litellm.AuthenticationError:
                raise error_cls(
                    f"Authentication failed for {self._settings.model}. "
                    f"Check that {self._settings.api_key_env} is set correctly."
                ) from None
            except litellm.BadRequestError as e:
                raise error_cls(f"Bad request to {self._settings.model}: {e}") from e
            except _RETRYABLE_ERRORS as e:
                last_error = e
            except Exception as e:
                # Not found, permission denied, unprocessable entity and
                # anything raised outside litellm's own hierarchy
                raise error_cls(f"{self._settings.model} request failed: {e}") from e

            if attempt < max_retries - 1:
                backoff = _BASE_BACKOFF * (2**attempt)
                logger.warning(
                    "Retry %d/%d for %s (%s, backoff: %.1fs)",
                    attempt + 1,
                    max_retries,
                    self._settings.display_name,
                    _short_error_reason(last_error),
                    backoff,
                )
                await asyncio.sleep(backoff)

        raise error_cls(
            f"Call to {self._settings.model} failed after {max_retries} "
            f"attempts: {last_error}"
        ) from last_error

    def _to_fragment(self, chunk: Any) -> Fragment:
        """Convert one LiteLLM stream chunk into a Fragment."""
        text = ""
        choices = getattr(chunk, "choices", None)
        if choices and choices[0].delta:
            text = choices[0].delta.content or ""
        return Fragment(text=text, citations=extract_citations(chunk))

    def _extract_content(self, response: Any) -> str:
        """Extract text content from a LiteLLM response."""
        if not response.choices:
            return ""
        message = response.choices[0].message
        return message.content or "" if message else ""


def build_provider(settings: ProviderSettings) -> LiteLLMProvider:
    """Build the process-wide provider handle.

    Call once at startup and pass the result to every consumer; the
    handle is read-only afterwards and needs no locking.
    """
    logger.debug("Initializing provider handle for %s", settings.model)
    return LiteLLMProvider(settings)
