"""Shared test doubles for the tutor completion core."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from pydantic import BaseModel

from tutorcenter.providers.base import CompletionProvider
from tutorcenter.schemas.request import PromptRequest
from tutorcenter.schemas.settings import ProviderSettings, TutorSettings
from tutorcenter.schemas.streaming import Fragment
from tutorcenter.schemas.translation import TranslationResult

FAKE_KEY_ENV = "FAKE_TUTOR_API_KEY"


class FakeProvider(CompletionProvider):
    """In-memory provider that replays canned fragments or a canned payload."""

    def __init__(
        self,
        fragments: list[Fragment] | None = None,
        structured: dict | None = None,
        structured_error: Exception | None = None,
    ) -> None:
        super().__init__(
            ProviderSettings(
                model="fake/tutor-model",
                display_name="Fake Tutor Model",
                api_key_env=FAKE_KEY_ENV,
            )
        )
        self._fragments = fragments or []
        self._structured = structured
        self._structured_error = structured_error
        self.requests: list[PromptRequest] = []
        self.closed = False

    async def _stream(self, request: PromptRequest, api_key: str) -> AsyncIterator[Fragment]:
        self.requests.append(request)
        try:
            for fragment in self._fragments:
                yield fragment
        finally:
            self.closed = True

    async def complete_structured(
        self, request: PromptRequest, schema: type[BaseModel] = TranslationResult
    ) -> BaseModel:
        self._require_api_key()
        self.requests.append(request)
        if self._structured_error is not None:
            raise self._structured_error
        return schema.model_validate(self._structured)


@pytest.fixture
def fake_key(monkeypatch):
    monkeypatch.setenv(FAKE_KEY_ENV, "fake-key")


@pytest.fixture
def no_fake_key(monkeypatch):
    monkeypatch.delenv(FAKE_KEY_ENV, raising=False)


@pytest.fixture
def tutor_settings() -> TutorSettings:
    return TutorSettings(
        subjects=["All", "Physics", "Chemistry", "Biology", "Mathematics"],
        languages=["English", "Urdu", "Sindhi", "All"],
        translation_targets=["Urdu", "Sindhi", "English"],
    )


@pytest.fixture
def fake_provider_cls() -> type[FakeProvider]:
    return FakeProvider
