"""Exception hierarchy for the tutor completion core.

Streaming failures never escape the provider as exceptions: they are turned
into a terminal error Fragment. The structured (translator) call raises
these explicitly because there is no partial result to fall back to.
"""

from __future__ import annotations


class TutorError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(TutorError):
    """Raised when a required setting (the provider API key) is missing.

    Always raised before any network call is attempted.
    """


class ProviderStreamError(TutorError):
    """Raised inside a streaming call when the provider or transport fails.

    Caught by the provider and converted into an error Fragment.
    """


class ProviderRequestError(TutorError):
    """Raised when a non-streaming provider call fails outright."""


class MalformedResponse(TutorError):
    """Raised when a structured response does not match the expected schema."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Malformed structured response: {detail}")
        self.detail = detail
