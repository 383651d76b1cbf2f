"""
Certificate provisioning — reuse a matching ACM certificate or request one.

A certificate is reusable when its primary domain equals the requested
primary domain and its subject alternative names include every requested
alternative name. The search always runs, even with no alternative names,
so re-deploys never pile up duplicate certificates.
"""

from __future__ import annotations

import hashlib

import structlog

from cloudfront_certificate.domain.models import (
    REUSABLE_STATUSES,
    DomainSet,
    ProvisioningContext,
    normalize_domain,
)
from cloudfront_certificate.domain.ports import CertificateAuthority
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result

log = structlog.get_logger()


def idempotency_token(domains: DomainSet) -> str:
    """Stable ACM idempotency token (at most 32 word characters) for a domain set."""
    return hashlib.sha256("|".join(domains.names).encode()).hexdigest()[:32]


class CertificateProvisioner:
    """Find or request the certificate for a ProvisioningContext."""

    def __init__(self, authority: CertificateAuthority) -> None:
        self._authority = authority

    def provision(self, context: ProvisioningContext) -> Result[ProvisioningContext]:
        """Return ``context`` carrying the ARN of a reused or new certificate."""
        return (
            self.find_reusable(context.domains)
            .flat_map(lambda arn: Result.success(arn) if arn else self.request(context.domains))
            .map(context.with_certificate)
        )

    def find_reusable(self, domains: DomainSet) -> Result[str]:
        """
        ARN of the first reusable certificate, or "" when there is none.

        Only certificates whose summary matches the primary domain are
        described; the listing already excludes revoked and failed ones.
        """
        listed = self._authority.list_certificates(REUSABLE_STATUSES)
        if listed.is_failure():
            return Result.failure_from(listed.error())

        primary = normalize_domain(domains.primary)
        candidates = [
            summary
            for summary in listed.value()
            if normalize_domain(summary.domain_name) == primary
        ]

        for summary in candidates:
            described = self._authority.describe_certificate(summary.arn)
            if described.is_failure():
                return Result.failure_from(described.error())
            if described.value().covers(domains.alternative_names):
                log.info(
                    "provisioner.reusing_certificate",
                    domain=domains.primary,
                    certificate_arn=summary.arn,
                    status=described.value().status,
                )
                return Result.success(summary.arn)

        log.info(
            "provisioner.no_reusable_certificate",
            domain=domains.primary,
            candidates=len(candidates),
        )
        return Result.success("")

    def request(self, domains: DomainSet) -> Result[str]:
        return self._authority.request_certificate(domains, idempotency_token(domains)).ensure(
            bool,
            ErrorCode.PROVISIONING_ERROR,
            f"Certificate request for {domains.primary} returned no certificate ARN",
        ).peek(
            lambda arn: log.info(
                "provisioner.certificate_created",
                domain=domains.primary,
                alternative_names=list(domains.alternative_names),
                certificate_arn=arn,
            )
        )
