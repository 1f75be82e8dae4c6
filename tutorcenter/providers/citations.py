"""Grounding-metadata citation extraction.

LiteLLM surfaces Gemini's web-search grounding as
``vertex_ai_grounding_metadata`` on responses and stream chunks (a list
of metadata dicts). Some versions put it in the delta's
``provider_specific_fields`` instead, so both places are checked.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from tutorcenter.schemas.streaming import Citation

GENERIC_TITLE = "Source"


def _get(obj: Any, *keys: str) -> Any:
    """Read the first present key from a dict or attribute from an object."""
    if obj is None:
        return None
    for key in keys:
        if isinstance(obj, dict):
            value = obj.get(key)
        else:
            value = getattr(obj, key, None)
        if value is not None:
            return value
    return None


def citation_title(uri: str, title: str | None) -> str:
    """Pick a display title: provider title, else URI host name, else a placeholder."""
    if isinstance(title, str) and title.strip():
        return title.strip()
    try:
        host = urlparse(uri).hostname
    except ValueError:
        host = None
    return host or GENERIC_TITLE


def _metadata_entries(chunk: Any) -> list[Any]:
    metadata = _get(chunk, "vertex_ai_grounding_metadata")
    if metadata is None:
        choices = _get(chunk, "choices") or []
        if choices:
            delta = _get(choices[0], "delta", "message")
            fields = _get(delta, "provider_specific_fields")
            metadata = _get(fields, "grounding_metadata", "groundingMetadata")
    if metadata is None:
        return []
    if isinstance(metadata, list):
        return metadata
    return [metadata]


def extract_citations(chunk: Any) -> list[Citation]:
    """Extract web citations from one provider chunk or response.

    Entries without a usable ``web.uri`` are skipped. Order is preserved
    and duplicates are kept; de-duplication is the aggregator's job.
    """
    citations: list[Citation] = []
    for entry in _metadata_entries(chunk):
        grounding_chunks = _get(entry, "groundingChunks", "grounding_chunks") or []
        for grounding_chunk in grounding_chunks:
            web = _get(grounding_chunk, "web")
            uri = _get(web, "uri")
            if not isinstance(uri, str) or not uri.strip():
                continue
            uri = uri.strip()
            citations.append(Citation(uri=uri, title=citation_title(uri, _get(web, "title"))))
    return citations
