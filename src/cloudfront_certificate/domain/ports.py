"""
Ports — Protocol-based interfaces for the two AWS services the pipeline drives.

These define WHAT the stages need from ACM and Route 53 without saying HOW
the calls are made. Adapters satisfy a port simply by implementing its
methods; stages and tests depend only on these protocols.

  Stages ← Ports (protocols) ← Adapters (boto3)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cloudfront_certificate.domain.models import (
    CertificateDetail,
    CertificateSummary,
    DnsChange,
    DomainSet,
    HostedZonePage,
)
from cloudfront_certificate.railway.result import Result


@runtime_checkable
class CertificateAuthority(Protocol):
    """
    Port: the certificate authority (AWS Certificate Manager).

    Status transitions belong to the authority; this system only lists,
    describes and requests.
    """

    def list_certificates(self, statuses: tuple[str, ...]) -> Result[list[CertificateSummary]]:
        """Every certificate in one of ``statuses``, across all pages."""
        ...

    def describe_certificate(self, arn: str) -> Result[CertificateDetail]: ...

    def request_certificate(self, domains: DomainSet, idempotency_token: str) -> Result[str]:
        """
        Request a DNS-validated certificate covering ``domains``.

        Returns the new ARN, or an empty string when the call succeeded
        without yielding one.
        """
        ...


@runtime_checkable
class DnsService(Protocol):
    """Port: the DNS service (Route 53)."""

    def list_hosted_zones(self, marker: str | None = None) -> Result[HostedZonePage]:
        """One page of hosted zones, starting at ``marker``."""
        ...

    def upsert_record(self, change: DnsChange) -> Result[str]:
        """Apply one UPSERT change batch; returns the change id."""
        ...
