"""Tutor Center: streaming tutor client for a hosted language model."""

__version__ = "0.1.0"

from tutorcenter.aggregator import aggregate, collect, finalize, fold
from tutorcenter.errors import (
    ConfigurationError,
    MalformedResponse,
    ProviderRequestError,
    ProviderStreamError,
    TutorError,
)
from tutorcenter.providers import CompletionProvider, LiteLLMProvider, build_provider
from tutorcenter.tutor import Tutor

__all__ = [
    "CompletionProvider",
    "ConfigurationError",
    "LiteLLMProvider",
    "MalformedResponse",
    "ProviderRequestError",
    "ProviderStreamError",
    "Tutor",
    "TutorError",
    "aggregate",
    "build_provider",
    "collect",
    "finalize",
    "fold",
]
