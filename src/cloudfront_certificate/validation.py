"""
Validation record publishing — wait for ACM's DNS challenges, then upsert them.

ACM fills in each domain's challenge record some seconds after the request,
not all at once. The publisher polls DescribeCertificate every two seconds
until every expected domain has a challenge (or is already validated), then
publishes the records concurrently:

  describe ──▶ all challenges ready? ──no──▶ sleep 2s ──▶ describe ...
                      │ yes
                      ▼
           list zones once ──▶ resolve each record ──▶ UPSERT in parallel

Publishing never starts with only a subset of domains ready. A certificate
that is already ISSUED needs no records and short-circuits successfully.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

import structlog

from cloudfront_certificate.domain.models import (
    ISSUED,
    PENDING_VALIDATION,
    DnsChange,
    DomainValidation,
    HostedZone,
    ResourceRecord,
)
from cloudfront_certificate.domain.ports import CertificateAuthority, DnsService
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result
from cloudfront_certificate.zones import ZoneResolver

log = structlog.get_logger()

DEFAULT_RETRIES = 31
POLL_INTERVAL_SECONDS = 2.0


class ValidationRecordPublisher:
    """
    Publish the DNS validation records of one certificate.

    Safe to run repeatedly: records are always UPSERTed and an issued
    certificate is left alone.
    """

    def __init__(
        self,
        authority: CertificateAuthority,
        dns: DnsService,
        resolver: ZoneResolver | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        max_workers: int = 8,
    ) -> None:
        self._authority = authority
        self._dns = dns
        self._resolver = resolver or ZoneResolver(dns)
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._max_workers = max_workers

    def publish(
        self,
        certificate_arn: str,
        expected_domain_count: int,
        retries: int = DEFAULT_RETRIES,
    ) -> Result[int]:
        """Wait for challenges, publish them, and return the number of records upserted."""
        return self.await_challenges(certificate_arn, expected_domain_count, retries).flat_map(
            self._publish_all
        )

    def await_challenges(
        self,
        certificate_arn: str,
        expected_domain_count: int,
        retries: int = DEFAULT_RETRIES,
    ) -> Result[tuple[DomainValidation, ...]]:
        """
        Poll until every validation on the certificate is ready or validated.

        A reused certificate may cover more names than were requested; all
        of them must be ready, and at least ``expected_domain_count``.

        Returns the ready validations (empty when the certificate is already
        ISSUED). Fails with VALIDATION_TIMEOUT when ``retries`` re-polls are
        not enough, and with UNEXPECTED_STATUS when the certificate leaves
        PENDING_VALIDATION for anything but ISSUED.
        """
        attempt = 0
        while True:
            described = self._authority.describe_certificate(certificate_arn)
            if described.is_failure():
                return Result.failure_from(described.error())
            certificate = described.value()

            if certificate.status == ISSUED:
                log.info("validation.already_issued", certificate_arn=certificate_arn)
                return Result.success(())
            if certificate.status != PENDING_VALIDATION:
                return Result.failure(
                    ErrorCode.UNEXPECTED_STATUS,
                    f"Certificate {certificate_arn} is {certificate.status} and cannot be validated",
                )

            ready = certificate.ready_validations
            satisfied = len(ready) + certificate.validated_count
            waiting = [v.domain_name for v in certificate.awaiting_challenges]
            complete = satisfied >= expected_domain_count and not waiting
            if complete or attempt >= retries:
                break

            attempt += 1
            log.info(
                "validation.waiting_for_challenges",
                certificate_arn=certificate_arn,
                ready=len(ready),
                validated=certificate.validated_count,
                expected=expected_domain_count,
                waiting=waiting,
                attempt=attempt,
            )
            self._sleep(self._poll_interval)

        if not complete:
            return Result.failure(
                ErrorCode.VALIDATION_TIMEOUT,
                f"Only {satisfied} of {expected_domain_count} domain validations "
                f"became available for {certificate_arn} after {attempt} retries"
                + (f"; still waiting on {', '.join(waiting)}" if waiting else ""),
            )
        return Result.success(ready)

    def _publish_all(self, validations: tuple[DomainValidation, ...]) -> Result[int]:
        # ACM hands out the same CNAME for a name and its wildcard.
        records = list(
            dict.fromkeys(v.resource_record for v in validations if v.resource_record)
        )
        if not records:
            return Result.success(0)

        return (
            self._resolver.list_zones()
            .flat_map(lambda zones: self._plan_changes(records, zones))
            .flat_map(self._upsert_concurrently)
        )

    def _plan_changes(
        self,
        records: list[ResourceRecord],
        zones: list[HostedZone],
    ) -> Result[list[DnsChange]]:
        return Result.all_of(
            [
                self._resolver.resolve(record.name, zones).map(
                    lambda zone, record=record: DnsChange(zone_id=zone.id, record=record)
                )
                for record in records
            ]
        )

    def _upsert_concurrently(self, changes: list[DnsChange]) -> Result[int]:
        """UPSERT every change in parallel; the first failure fails the batch."""
        for change in changes:
            log.info(
                "validation.publishing_record",
                record=change.record.name,
                type=change.record.type,
                zone_id=change.zone_id,
            )

        pool = ThreadPoolExecutor(max_workers=min(self._max_workers, len(changes)))
        try:
            futures = [pool.submit(self._dns.upsert_record, change) for change in changes]
            for future in as_completed(futures):
                outcome = future.result()
                if outcome.is_failure():
                    return Result.failure_from(outcome.error())
        finally:
            # In-flight upserts finish in the background; queued ones are dropped.
            pool.shutdown(wait=False, cancel_futures=True)

        log.info("validation.records_published", count=len(changes))
        return Result.success(len(changes))
