"""
Issuance waiting — block until ACM reports the certificate ISSUED.

ACM validates DNS records on its own schedule, typically within a few
minutes of the records propagating. The waiter polls once a minute for a
bounded number of attempts; a certificate still pending after the last
attempt, or one that moves to any state other than ISSUED, fails the run.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from cloudfront_certificate.domain.models import ISSUED, PENDING_VALIDATION, CertificateDetail
from cloudfront_certificate.domain.ports import CertificateAuthority
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result

log = structlog.get_logger()

DEFAULT_ATTEMPTS = 15
POLL_INTERVAL_SECONDS = 60.0


class IssuanceWaiter:
    def __init__(
        self,
        authority: CertificateAuthority,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._authority = authority
        self._poll_interval = poll_interval
        self._sleep = sleep

    def wait(
        self,
        certificate_arn: str,
        max_attempts: int = DEFAULT_ATTEMPTS,
    ) -> Result[CertificateDetail]:
        """Poll at most ``max_attempts`` times; sleep between polls, never after the last."""
        for attempt in range(1, max_attempts + 1):
            described = self._authority.describe_certificate(certificate_arn)
            if described.is_failure():
                return Result.failure_from(described.error())
            certificate = described.value()

            if certificate.status == ISSUED:
                log.info("issuance.issued", certificate_arn=certificate_arn, attempt=attempt)
                return Result.success(certificate)
            if certificate.status != PENDING_VALIDATION:
                return Result.failure(
                    ErrorCode.UNEXPECTED_STATUS,
                    f"Certificate {certificate_arn} is {certificate.status}, expected ISSUED",
                )

            if attempt < max_attempts:
                log.info(
                    "issuance.pending",
                    certificate_arn=certificate_arn,
                    attempt=attempt,
                    max_attempts=max_attempts,
                )
                self._sleep(self._poll_interval)

        return Result.failure(
            ErrorCode.ISSUANCE_TIMEOUT,
            f"Certificate {certificate_arn} was not issued after {max_attempts} attempts",
        )
