"""Tests for the generation error taxonomy."""

from __future__ import annotations

import pytest

from nanobanana.core.errors import (
    GenerationCancelledError,
    GenerationError,
    GenerationErrorKind,
    ImageTooLargeError,
    InvalidAPIKeyError,
    InvalidImageFormatError,
    InvalidRequestError,
    InvalidResponseError,
    NetworkError,
    NoImageGeneratedError,
    PromptTooLongError,
    ProviderApiError,
    QuotaExceededError,
    RateLimitExceededError,
    error_summary,
    user_message_for,
)

ALL_ERRORS = [
    InvalidRequestError(),
    PromptTooLongError(),
    ImageTooLargeError(),
    InvalidImageFormatError(),
    InvalidAPIKeyError(),
    RateLimitExceededError(),
    QuotaExceededError(),
    NetworkError(),
    InvalidResponseError(),
    NoImageGeneratedError(),
    ProviderApiError("boom"),
    GenerationCancelledError(),
]


@pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
def test_every_kind_has_a_message(error: GenerationError):
    assert isinstance(error, GenerationError)
    assert error.user_message
    assert user_message_for(error) == error.user_message


def test_kinds_are_distinct():
    assert len({e.kind for e in ALL_ERRORS}) == len(GenerationErrorKind)


def test_provider_message_is_surfaced():
    error = ProviderApiError("Model overloaded")

    assert error.user_message == "API error: Model overloaded"
    assert str(error) == "Model overloaded"


def test_detail_kept_out_of_user_message():
    error = PromptTooLongError("Prompt has 2001 characters")

    assert str(error) == "Prompt has 2001 characters"
    assert "2001" not in error.user_message


def test_cancelled_carries_partial_results():
    error = GenerationCancelledError([b"a", b"b"])

    assert error.partial_results == [b"a", b"b"]
    assert "2" in str(error)


def test_unexpected_error_message():
    assert user_message_for(RuntimeError("x")) == "Unexpected error: x"


def test_error_summary():
    summary = error_summary(RateLimitExceededError("429 from provider"))

    assert summary == {"error_kind": "rate_limit_exceeded", "error_detail": "429 from provider"}
