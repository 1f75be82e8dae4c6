"""Pydantic schemas shared across the tutor completion core."""

from tutorcenter.schemas.request import PromptRequest, TutorMode
from tutorcenter.schemas.settings import ProviderSettings, TutorSettings
from tutorcenter.schemas.streaming import (
    AccumulatedResult,
    Citation,
    Fragment,
    ResultState,
)
from tutorcenter.schemas.translation import TranslationResult, WordPair

__all__ = [
    "AccumulatedResult",
    "Citation",
    "Fragment",
    "PromptRequest",
    "ProviderSettings",
    "ResultState",
    "TranslationResult",
    "TutorMode",
    "TutorSettings",
    "WordPair",
]
