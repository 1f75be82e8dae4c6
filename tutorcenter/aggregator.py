"""Stream aggregation for streamed tutor responses.

Folds the ordered Fragments of one request into a growing
AccumulatedResult that the presentation layer can re-render after every
fold. Every operation returns a new result; nothing is mutated in place.

Error fragments are folded like any other fragment. Their text is appended
and ``has_error_fragment`` is set so callers can tell without matching
on the text.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable

from tutorcenter.schemas.streaming import (
    AccumulatedResult,
    Citation,
    Fragment,
    ResultState,
)

logger = logging.getLogger(__name__)


def merge_citations(
    existing: Iterable[Citation], incoming: Iterable[Citation]
) -> list[Citation]:
    """Concatenate citations, keeping only the first occurrence of each URI."""
    merged: dict[str, Citation] = {}
    for citation in (*existing, *incoming):
        merged.setdefault(citation.uri, citation)
    return list(merged.values())


def fold(accumulated: AccumulatedResult, fragment: Fragment) -> AccumulatedResult:
    """Fold one fragment into the running result.

    Text is appended as-is and citations are merged first-wins by URI.
    The returned result is always open.
    """
    return accumulated.model_copy(
        update={
            "text": accumulated.text + fragment.text,
            "citations": merge_citations(accumulated.citations, fragment.citations),
            "state": ResultState.OPEN,
            "has_error_fragment": accumulated.has_error_fragment or fragment.is_error,
        }
    )


def finalize(accumulated: AccumulatedResult) -> AccumulatedResult:
    """Mark the result complete once its source is exhausted."""
    return accumulated.model_copy(update={"state": ResultState.COMPLETE})


def fail(accumulated: AccumulatedResult, message: str) -> AccumulatedResult:
    """Mark a request that could not run at all as failed."""
    return accumulated.model_copy(update={"state": ResultState.FAILED, "error": message})


async def aggregate(
    fragments: AsyncIterator[Fragment],
) -> AsyncIterator[AccumulatedResult]:
    """Yield a snapshot after every fold, then one final complete snapshot.

    Fragments are pulled one at a time, in order. Closing this iterator
    early closes ``fragments`` as well, releasing the provider connection.
    """
    accumulated = AccumulatedResult()
    count = 0
    try:
        async for fragment in fragments:
            count += 1
            accumulated = fold(accumulated, fragment)
            yield accumulated
    finally:
        aclose = getattr(fragments, "aclose", None)
        if aclose is not None:
            await aclose()

    logger.debug(
        "Aggregated %d fragments (%d chars, %d citations)",
        count,
        len(accumulated.text),
        len(accumulated.citations),
    )
    yield finalize(accumulated)


async def collect(fragments: AsyncIterator[Fragment]) -> AccumulatedResult:
    """Drain a fragment stream and return the final complete result."""
    result = AccumulatedResult()
    async for snapshot in aggregate(fragments):
        result = snapshot
    return result
