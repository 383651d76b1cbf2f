"""
ACM adapter — certificate listing, description and requests via boto3.

Adapter layer — implements the CertificateAuthority port on top of a boto3
``acm`` client. Raw response dictionaries are translated into domain models
here and nowhere else.

Throttling and connection errors are retried with tenacity; every other
botocore error is captured into a Result failure, so no exception leaks
into the stages.
"""

from __future__ import annotations

from typing import Any

import structlog

from cloudfront_certificate.adapters.retry import retry_transient
from cloudfront_certificate.domain.models import (
    DNS_VALIDATION,
    CertificateDetail,
    CertificateSummary,
    DomainSet,
    DomainValidation,
    ResourceRecord,
)
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result

log = structlog.get_logger()


def parse_certificate(raw: dict[str, Any]) -> CertificateDetail:
    """Translate the ``Certificate`` member of DescribeCertificate."""
    validations = []
    for option in raw.get("DomainValidationOptions", []):
        record = option.get("ResourceRecord")
        validations.append(
            DomainValidation(
                domain_name=option["DomainName"],
                validation_status=option.get("ValidationStatus"),
                validation_method=option.get("ValidationMethod"),
                resource_record=ResourceRecord(
                    name=record["Name"], type=record["Type"], value=record["Value"]
                )
                if record
                else None,
            )
        )
    return CertificateDetail(
        arn=raw["CertificateArn"],
        domain_name=raw.get("DomainName", ""),
        status=raw.get("Status", "UNKNOWN"),
        subject_alternative_names=frozenset(raw.get("SubjectAlternativeNames", [])),
        domain_validations=tuple(validations),
    )


class AcmCertificateAuthority:
    """
    Talk to AWS Certificate Manager.

    Implements the CertificateAuthority port. The client must live in
    us-east-1 for the certificate to be attachable to CloudFront.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    def list_certificates(self, statuses: tuple[str, ...]) -> Result[list[CertificateSummary]]:
        return Result.from_computation(
            lambda: self._do_list(statuses),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            "Listing ACM certificates failed",
        )

    @retry_transient
    def _do_list(self, statuses: tuple[str, ...]) -> list[CertificateSummary]:
        paginator = self._client.get_paginator("list_certificates")
        summaries = [
            CertificateSummary(
                arn=item["CertificateArn"],
                domain_name=item.get("DomainName", ""),
                status=item.get("Status"),
            )
            for page in paginator.paginate(CertificateStatuses=list(statuses))
            for item in page.get("CertificateSummaryList", [])
        ]
        log.debug("acm.certificates_listed", count=len(summaries))
        return summaries

    def describe_certificate(self, arn: str) -> Result[CertificateDetail]:
        return Result.from_computation(
            lambda: self._do_describe(arn),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            f"Describing certificate {arn} failed",
        )

    @retry_transient
    def _do_describe(self, arn: str) -> CertificateDetail:
        response = self._client.describe_certificate(CertificateArn=arn)
        return parse_certificate(response["Certificate"])

    def request_certificate(self, domains: DomainSet, idempotency_token: str) -> Result[str]:
        """
        Request a DNS-validated certificate.

        SubjectAlternativeNames is only sent when there are alternative
        names: ACM rejects an empty list.
        """
        return Result.from_computation(
            lambda: self._do_request(domains, idempotency_token),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            f"Requesting a certificate for {domains.primary} failed",
        )

    @retry_transient
    def _do_request(self, domains: DomainSet, idempotency_token: str) -> str:
        params: dict[str, Any] = {
            "DomainName": domains.primary,
            "ValidationMethod": DNS_VALIDATION,
            "DomainValidationOptions": [
                {"DomainName": name, "ValidationDomain": name} for name in domains.names
            ],
            "IdempotencyToken": idempotency_token,
        }
        if domains.alternative_names:
            params["SubjectAlternativeNames"] = list(domains.alternative_names)

        response = self._client.request_certificate(**params)
        arn: str = response.get("CertificateArn") or ""
        log.info("acm.certificate_requested", domain=domains.primary, certificate_arn=arn)
        return arn
