"""
Shared fixtures for the cloudfront-certificate test suite.

Ports are replaced by MagicMock objects returning Result values; sleeps are
recorded instead of performed so polling tests run instantly.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import structlog


@pytest.fixture(autouse=True)
def _quiet_structlog() -> None:
    """Route log events to structlog's in-memory capture instead of stdout."""
    structlog.reset_defaults()
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
    )


@pytest.fixture()
def authority() -> MagicMock:
    """A mock CertificateAuthority port."""
    return MagicMock()


@pytest.fixture()
def dns() -> MagicMock:
    """A mock DnsService port."""
    return MagicMock()


@pytest.fixture()
def sleeps() -> list[float]:
    """Intervals passed to the injected sleep function, in call order."""
    return []
