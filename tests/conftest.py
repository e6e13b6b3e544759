"""Shared test fixtures for the gdocify test suite."""

from __future__ import annotations

import pytest

from gdocify.config import GdocifyConfig
from gdocify.converter.md_to_docs import MarkdownToDocsConverter


@pytest.fixture
def config() -> GdocifyConfig:
    """Default test configuration with a dummy token."""
    return GdocifyConfig(token="test_token_1234")


@pytest.fixture
def fast_config() -> GdocifyConfig:
    """Configuration tuned for fast, deterministic transport tests."""
    return GdocifyConfig(
        token="test-token-1234",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # High RPS so the token bucket never blocks during tests.
        rate_limit_rps=10_000.0,
    )


@pytest.fixture
def converter(config: GdocifyConfig) -> MarkdownToDocsConverter:
    """Markdown-to-Docs converter using the default test config."""
    return MarkdownToDocsConverter(config)
