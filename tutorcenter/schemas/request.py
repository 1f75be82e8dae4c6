"""Prompt request schema.

A PromptRequest is built once per user-initiated call and never mutated.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TutorMode(StrEnum):
    """Tutor pages the client can serve."""

    QA = "qa"
    BOOKS = "books"
    VISUAL = "visual"
    GRAMMAR = "grammar"
    TRANSLATOR = "translator"


class PromptRequest(BaseModel):
    """Everything needed to issue exactly one call to the model provider."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="Free-form user text sent as the user message")
    system_instruction: str = Field(
        description="Rendered system instruction with template variables interpolated"
    )
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Template variables already interpolated into system_instruction",
    )
    use_web_grounding: bool = Field(
        default=False, description="Enable the provider's web search tool for this call"
    )
    output_schema: type[BaseModel] | None = Field(
        default=None, description="Pydantic model constraining structured output"
    )
    mode: TutorMode | None = Field(default=None, description="Tutor page that built this request")
