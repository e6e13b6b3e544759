"""Tests for the gdocify error hierarchy."""

from __future__ import annotations

import pytest

from gdocify.errors import (
    ErrorCode,
    GdocifyAuthError,
    GdocifyConversionError,
    GdocifyConversionFailedError,
    GdocifyError,
    GdocifyInlineScanError,
    GdocifyInputError,
    GdocifyNetworkError,
    GdocifyNotFoundError,
    GdocifyPermissionError,
    GdocifyRateLimitError,
    GdocifyRetryExhaustedError,
    GdocifyUnsupportedElementError,
    GdocifyValidationError,
)


@pytest.mark.parametrize(
    ("error_type", "code"),
    [
        (GdocifyInputError, ErrorCode.INPUT_ERROR),
        (GdocifyValidationError, ErrorCode.VALIDATION_ERROR),
        (GdocifyAuthError, ErrorCode.AUTH_ERROR),
        (GdocifyPermissionError, ErrorCode.PERMISSION_ERROR),
        (GdocifyNotFoundError, ErrorCode.NOT_FOUND),
        (GdocifyRateLimitError, ErrorCode.RATE_LIMITED),
        (GdocifyRetryExhaustedError, ErrorCode.RETRY_EXHAUSTED),
        (GdocifyNetworkError, ErrorCode.NETWORK_ERROR),
        (GdocifyConversionFailedError, ErrorCode.CONVERSION_FAILED),
        (GdocifyInlineScanError, ErrorCode.INLINE_SCAN_ERROR),
        (GdocifyUnsupportedElementError, ErrorCode.UNSUPPORTED_ELEMENT),
    ],
)
def test_codes(error_type, code):
    err = error_type("message", context={"k": 1})
    assert err.code == code
    assert err.message == "message"
    assert err.context == {"k": 1}
    assert isinstance(err, GdocifyError)


def test_conversion_errors_share_a_base():
    for error_type in (
        GdocifyConversionFailedError, GdocifyInlineScanError, GdocifyUnsupportedElementError,
    ):
        assert issubclass(error_type, GdocifyConversionError)


def test_cause_is_chained():
    cause = RuntimeError("inner")
    err = GdocifyConversionFailedError("outer", cause=cause)
    assert err.cause is cause
    assert err.__cause__ is cause


def test_context_defaults_to_empty_dict():
    assert GdocifyInputError("x").context == {}


def test_repr_includes_context():
    text = repr(GdocifyNotFoundError("gone", context={"path": "/documents/x"}))
    assert text.startswith("GdocifyNotFoundError(")
    assert "'/documents/x'" in text


def test_codes_compare_as_strings():
    assert GdocifyAuthError("x").code == "AUTH_ERROR"
