"""Shared test fixtures for the retryafter test suite."""

from __future__ import annotations

import pytest

from retryafter.config import RetryAfterConfig


@pytest.fixture
def config() -> RetryAfterConfig:
    """Default limits: 3 attempts, 30 s cap, 60 s deadline."""
    return RetryAfterConfig()
