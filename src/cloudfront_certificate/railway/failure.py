"""
Failure description — structured error information for the failure track.

ErrorCode enumerates the ways a certificate run can end badly. Every
Failure carries one code plus a human-readable message, so the hook can
report precisely why a deployment was aborted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """Fatal outcomes of a certificate run."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings are missing or invalid (distribution resource, budgets)."""

    PROVISIONING_ERROR = "PROVISIONING_ERROR"
    """The certificate request returned without a usable ARN."""

    ZONE_NOT_FOUND = "ZONE_NOT_FOUND"
    """A DNS challenge record maps to no hosted zone owned by the account."""

    VALIDATION_TIMEOUT = "VALIDATION_TIMEOUT"
    """Challenge records did not materialize for every domain in time."""

    ISSUANCE_TIMEOUT = "ISSUANCE_TIMEOUT"
    """The certificate stayed in PENDING_VALIDATION past the attempt budget."""

    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
    """The certificate reached a state that polling cannot recover from."""

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    """An ACM or Route 53 call failed."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Anything unexpected raised while the pipeline was running."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor: error code, message, optional exception, timestamp.

    >>> desc = FailureDescription(ErrorCode.ZONE_NOT_FOUND, "No hosted zone for _x.example.org")
    >>> desc.code
    <ErrorCode.ZONE_NOT_FOUND: 'ZONE_NOT_FOUND'>
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
