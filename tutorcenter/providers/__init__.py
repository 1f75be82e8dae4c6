"""Tutor Center provider layer.

The provider layer is the only way the hosted model is called.
All LLM interactions go through LiteLLMProvider via the CompletionProvider
interface.
"""

from tutorcenter.providers.base import CompletionProvider
from tutorcenter.providers.citations import citation_title, extract_citations
from tutorcenter.providers.litellm_provider import (
    ERROR_PREFIX,
    LiteLLMProvider,
    build_provider,
    parse_structured,
)

__all__ = [
    "ERROR_PREFIX",
    "CompletionProvider",
    "LiteLLMProvider",
    "build_provider",
    "citation_title",
    "extract_citations",
    "parse_structured",
]
