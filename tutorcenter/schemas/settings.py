"""Configuration schemas for the provider handle and the tutor facade.

Loaded from config/defaults.toml by tutorcenter.settings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderSettings(BaseModel):
    """Immutable settings for the single process-wide provider handle."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="LiteLLM model identifier (e.g. 'gemini/gemini-2.5-flash')")
    display_name: str = Field(description="Human-friendly model name for CLI output")
    api_key_env: str = Field(description="Environment variable name holding the API key")
    api_base: str = Field(default="", description="Custom API base URL (empty = provider default)")
    timeout: int = Field(default=120, gt=0, description="Timeout in seconds for each model call")
    max_retries: int = Field(
        default=3, ge=1, le=10, description="Attempts when opening a call hits a transient error"
    )


class TutorSettings(BaseModel):
    """Curriculum defaults and the choices offered to students."""

    model_config = ConfigDict(frozen=True)

    class_level: str = Field(default="Class 10", description="Student class level")
    board: str = Field(
        default="Sindh Textbook Board (Jamshoro)", description="Curriculum board"
    )
    default_subject: str = Field(default="All", description="Subject used when none is chosen")
    default_language: str = Field(default="English", description="Default response language")
    subjects: list[str] = Field(default_factory=list, description="Selectable subjects")
    languages: list[str] = Field(default_factory=list, description="Selectable response languages")
    translation_targets: list[str] = Field(
        default_factory=list, description="Selectable translation target languages"
    )
