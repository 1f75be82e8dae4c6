"""Tutor facade consumed by the presentation layer.

Builds one PromptRequest per user action from the fixed page templates,
sends it through the injected provider handle, and hands back either a
sequence of AccumulatedResult snapshots (chat pages) or a single
TranslationResult (translator page).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from tutorcenter.aggregator import aggregate, fail
from tutorcenter.errors import ConfigurationError
from tutorcenter.prompts import render_prompt
from tutorcenter.providers.base import CompletionProvider
from tutorcenter.schemas.request import PromptRequest, TutorMode
from tutorcenter.schemas.settings import TutorSettings
from tutorcenter.schemas.streaming import AccumulatedResult
from tutorcenter.schemas.translation import TranslationResult

logger = logging.getLogger(__name__)

# Pages that let the model consult web search
_GROUNDED_MODES = frozenset({TutorMode.QA, TutorMode.BOOKS, TutorMode.VISUAL})

# Pages whose instruction does not depend on the selected subject
_SUBJECTLESS_MODES = frozenset({TutorMode.GRAMMAR, TutorMode.TRANSLATOR})


def _check_choice(kind: str, value: str, choices: list[str]) -> None:
    if choices and value not in choices:
        raise ValueError(
            f"Unknown {kind} {value!r}. Choose one of: {', '.join(choices)}"
        )


class Tutor:
    """Entry point for the tutor pages.

    Holds the shared provider handle and curriculum settings. Each call
    builds its own request and result; nothing is shared between
    concurrent calls except the read-only provider.
    """

    def __init__(
        self, provider: CompletionProvider, settings: TutorSettings | None = None
    ) -> None:
        self._provider = provider
        self._settings = settings or TutorSettings()

    @property
    def settings(self) -> TutorSettings:
        return self._settings

    @property
    def provider(self) -> CompletionProvider:
        return self._provider

    def build_request(
        self,
        mode: TutorMode,
        prompt: str,
        *,
        subject: str | None = None,
        language: str | None = None,
        target_language: str | None = None,
    ) -> PromptRequest:
        """Render the page template for ``mode`` into an immutable request.

        Raises:
            ValueError: On an empty prompt or an unknown subject/language.
        """
        if not prompt.strip():
            raise ValueError("Prompt must not be empty")

        settings = self._settings
        variables = {
            "class_level": settings.class_level,
            "board": settings.board,
        }

        if mode is TutorMode.TRANSLATOR:
            target = target_language or (settings.translation_targets or ["Urdu"])[0]
            _check_choice("translation target", target, settings.translation_targets)
            variables["target_language"] = target
            return PromptRequest(
                prompt=f'Translate the following text into {target}: "{prompt.strip()}"',
                system_instruction=render_prompt(mode.value, **variables),
                variables=variables,
                output_schema=TranslationResult,
                mode=mode,
            )

        language = language or settings.default_language
        _check_choice("language", language, settings.languages)
        variables["language"] = language

        if mode not in _SUBJECTLESS_MODES:
            subject = subject or settings.default_subject
            _check_choice("subject", subject, settings.subjects)
            variables["subject"] = subject

        return PromptRequest(
            prompt=prompt,
            system_instruction=render_prompt(mode.value, **variables),
            variables=variables,
            use_web_grounding=mode in _GROUNDED_MODES,
            mode=mode,
        )

    async def stream(
        self,
        mode: TutorMode,
        prompt: str,
        *,
        subject: str | None = None,
        language: str | None = None,
    ) -> AsyncIterator[AccumulatedResult]:
        """Stream snapshots of the growing answer for a chat page.

        A missing API key yields a single failed snapshot instead of
        raising, so the page can show the message in place of the answer.
        """
        if mode is TutorMode.TRANSLATOR:
            raise ValueError("The translator page is not streamed; use translate()")

        request = self.build_request(mode, prompt, subject=subject, language=language)
        try:
            fragments = self._provider.stream_completion(request)
        except ConfigurationError as e:
            logger.warning("Cannot start %s request: %s", mode.value, e)
            yield fail(AccumulatedResult(), str(e))
            return

        snapshots = aggregate(fragments)
        try:
            async for snapshot in snapshots:
                yield snapshot
        finally:
            await snapshots.aclose()

    def ask(
        self, prompt: str, *, subject: str | None = None, language: str | None = None
    ) -> AsyncIterator[AccumulatedResult]:
        """Q&A chat."""
        return self.stream(TutorMode.QA, prompt, subject=subject, language=language)

    def lookup_book(
        self, query: str, *, subject: str | None = None, language: str | None = None
    ) -> AsyncIterator[AccumulatedResult]:
        """Textbook summaries and solved exercises."""
        return self.stream(TutorMode.BOOKS, query, subject=subject, language=language)

    def explain_visually(
        self, prompt: str, *, subject: str | None = None, language: str | None = None
    ) -> AsyncIterator[AccumulatedResult]:
        """Practical learning with diagrams and experiments."""
        return self.stream(TutorMode.VISUAL, prompt, subject=subject, language=language)

    def explain_grammar(
        self, prompt: str, *, language: str | None = None
    ) -> AsyncIterator[AccumulatedResult]:
        return self.stream(TutorMode.GRAMMAR, prompt, language=language)

    async def translate(self, text: str, target_language: str | None = None) -> TranslationResult:
        """Translate ``text`` with a word-by-word breakdown.

        Raises:
            ConfigurationError: If no API key is configured.
            ProviderRequestError: If the provider call fails.
            MalformedResponse: If the provider returns text that is not
                valid translation JSON.
        """
        request = self.build_request(
            TutorMode.TRANSLATOR, text, target_language=target_language
        )
        result = await self._provider.complete_structured(request, TranslationResult)
        logger.debug(
            "Translated %d chars into %s (%d word pairs)",
            len(text),
            request.variables["target_language"],
            len(result.word_by_word),
        )
        return result
