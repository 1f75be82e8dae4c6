"""Streaming schemas for real-time token delivery.

Defines the Fragment emitted once per provider chunk, the Citation records
it carries, and the AccumulatedResult the aggregator folds fragments into.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ResultState(StrEnum):
    """Lifecycle state of an AccumulatedResult."""

    OPEN = "open"
    COMPLETE = "complete"
    FAILED = "failed"


class Citation(BaseModel):
    """A web source cited alongside generated text.

    Two citations are the same citation when their URIs are equal.
    """

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Source URI, the identity key")
    title: str = Field(description="Display title for the source")


class Fragment(BaseModel):
    """One incremental unit of a streamed model response."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Text delta in this chunk")
    citations: list[Citation] = Field(
        default_factory=list, description="Citations found in this chunk, in order"
    )
    is_error: bool = Field(
        default=False, description="True when text carries a provider failure message"
    )


class AccumulatedResult(BaseModel):
    """Running merge of every Fragment seen so far for one request."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Concatenated text so far")
    citations: list[Citation] = Field(
        default_factory=list, description="Unique-by-URI citations in arrival order"
    )
    state: ResultState = Field(default=ResultState.OPEN, description="Lifecycle state")
    error: str | None = Field(
        default=None, description="Failure message when state is failed"
    )
    has_error_fragment: bool = Field(
        default=False, description="True once an error Fragment has been folded in"
    )

    @property
    def is_terminal(self) -> bool:
        """True once the result is complete or failed."""
        return self.state is not ResultState.OPEN
