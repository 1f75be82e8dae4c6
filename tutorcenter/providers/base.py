"""Abstract base class for completion providers.

Defines the CompletionProvider interface every model adapter implements.
The tutor facade interacts exclusively through this interface and never
calls provider SDKs directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel

from tutorcenter.keys import require_api_key
from tutorcenter.schemas.request import PromptRequest
from tutorcenter.schemas.settings import ProviderSettings
from tutorcenter.schemas.streaming import Fragment
from tutorcenter.schemas.translation import TranslationResult


class CompletionProvider(ABC):
    """Abstract interface for the hosted model behind the tutor.

    Initialized once per process from an immutable ProviderSettings and
    shared by every request afterwards. Holds no request-scoped state.
    """

    def __init__(self, settings: ProviderSettings) -> None:
        self._settings = settings

    # ── Identity ──────────────────────────────────────────────

    @property
    def model_id(self) -> str:
        """LiteLLM model identifier used for routing."""
        return self._settings.model

    @property
    def display_name(self) -> str:
        """Human-friendly model name for CLI output."""
        return self._settings.display_name

    @property
    def api_key_env(self) -> str:
        """Environment variable the API key is read from."""
        return self._settings.api_key_env

    @property
    def settings(self) -> ProviderSettings:
        """The full ProviderSettings backing this provider."""
        return self._settings

    def _require_api_key(self) -> str:
        """Return the API key, raising ConfigurationError when absent."""
        return require_api_key(self._settings.api_key_env)

    # ── Core interface ────────────────────────────────────────

    def stream_completion(self, request: PromptRequest) -> AsyncIterator[Fragment]:
        """Open a streamed completion for one request.

        Credentials are checked here, eagerly, so a missing key raises
        ConfigurationError before the stream is returned and before any
        network call. The returned async iterator is single-pass.

        Args:
            request: The prompt request to send.

        Returns:
            An async iterator yielding one Fragment per provider chunk.
            Provider failures end the iterator with one Fragment whose
            ``is_error`` is True; they are never raised.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        api_key = self._require_api_key()
        return self._stream(request, api_key)

    @abstractmethod
    def _stream(self, request: PromptRequest, api_key: str) -> AsyncIterator[Fragment]:
        """Provider-specific streaming implementation (an async generator)."""

    @abstractmethod
    async def complete_structured(
        self,
        request: PromptRequest,
        schema: type[BaseModel] = TranslationResult,
    ) -> BaseModel:
        """Issue one non-streaming call constrained to ``schema``.

        Args:
            request: The prompt request to send.
            schema: Pydantic model the response text must validate against.

        Returns:
            An instance of ``schema`` parsed from the response text.

        Raises:
            ConfigurationError: If no API key is configured.
            ProviderRequestError: If the provider call fails.
            MalformedResponse: If the response is not valid JSON for ``schema``.
        """
