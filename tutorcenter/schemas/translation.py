"""Structured translation schema.

Doubles as the provider output schema for the translator's JSON mode,
so the field aliases are the exact JSON wire names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WordPair(BaseModel):
    """One word or short phrase and its translation."""

    original: str = Field(description="The word from the original text")
    translation: str = Field(description="The translation of that word")


class TranslationResult(BaseModel):
    """Full translation plus a word-by-word breakdown."""

    model_config = ConfigDict(populate_by_name=True)

    main_translation: str = Field(
        alias="mainTranslation", description="The full translation of the text"
    )
    word_by_word: list[WordPair] = Field(
        alias="wordByWord", description="A breakdown of each word or small phrase"
    )
    explanation: str | None = Field(
        default=None, description="Optional short note on the translation"
    )
