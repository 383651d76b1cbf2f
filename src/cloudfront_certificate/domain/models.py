"""
Domain models — immutable values describing certificates, DNS zones and the run.

These are pure value objects with no behavior beyond self-validation and
small derived properties. Adapters translate raw ACM and Route 53 responses
into them; stages only ever see these types.

All models are frozen dataclasses. State that evolves during a run (the
certificate ARN once known) is carried by replacing the ProvisioningContext,
never by mutating it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any

PENDING_VALIDATION = "PENDING_VALIDATION"
ISSUED = "ISSUED"
INACTIVE = "INACTIVE"
VALIDATION_SUCCESS = "SUCCESS"
DNS_VALIDATION = "DNS"

# Certificates in these states are candidates for reuse.
REUSABLE_STATUSES: tuple[str, ...] = (PENDING_VALIDATION, ISSUED, INACTIVE)

SSL_SUPPORT_METHOD = "sni-only"
VALIDATION_RECORD_TTL = 60
CHANGE_COMMENT = "Record created by cloudfront-certificate"

_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


def normalize_domain(name: str) -> str:
    """Lower-case a DNS name and strip a single trailing dot."""
    name = name.strip().lower()
    return name[:-1] if name.endswith(".") else name


def is_valid_domain_name(name: str) -> bool:
    """
    Check that ``name`` is a syntactically valid DNS name.

    A leading ``*.`` wildcard label is allowed. Each remaining label is
    1-63 characters of letters, digits and inner hyphens; the whole name
    is at most 253 characters.
    """
    name = normalize_domain(name)
    if not name or len(name) > 253:
        return False
    labels = name.split(".")
    if labels[0] == "*":
        labels = labels[1:]
        if not labels:
            return False
    return all(_LABEL.match(label) for label in labels)


@dataclass(frozen=True, slots=True)
class DomainSet:
    """
    Ordered domain names a certificate must cover.

    The first name is the primary (common) name; the rest are subject
    alternative names. Non-empty, valid, duplicate-free.
    """

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.names:
            raise ValueError("A domain set needs at least one domain name")
        invalid = [n for n in self.names if not is_valid_domain_name(n)]
        if invalid:
            raise ValueError(f"Invalid domain name(s): {', '.join(invalid)}")
        if len({normalize_domain(n) for n in self.names}) != len(self.names):
            raise ValueError(f"Duplicate domain names in {list(self.names)}")

    @classmethod
    def of(cls, primary: str, alternative_names: list[str] | None = None) -> DomainSet:
        return cls(names=(primary, *(alternative_names or [])))

    @property
    def primary(self) -> str:
        return self.names[0]

    @property
    def alternative_names(self) -> tuple[str, ...]:
        return self.names[1:]

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True, slots=True)
class ResourceRecord:
    """A DNS challenge record computed by ACM (always CNAME in practice)."""

    name: str
    type: str
    value: str


@dataclass(frozen=True, slots=True)
class DomainValidation:
    """
    Validation state for one domain of a certificate.

    ``resource_record`` stays None until ACM has computed the challenge.
    """

    domain_name: str
    validation_status: str | None = None
    validation_method: str | None = None
    resource_record: ResourceRecord | None = None

    @property
    def is_ready(self) -> bool:
        """Pending, DNS-validated, and the challenge record is available."""
        return (
            self.validation_status == PENDING_VALIDATION
            and self.validation_method == DNS_VALIDATION
            and self.resource_record is not None
        )

    @property
    def is_validated(self) -> bool:
        return self.validation_status == VALIDATION_SUCCESS


@dataclass(frozen=True, slots=True)
class CertificateSummary:
    """One row of the ACM certificate listing."""

    arn: str
    domain_name: str
    status: str | None = None


@dataclass(frozen=True, slots=True)
class CertificateDetail:
    """Full description of an ACM certificate, as returned by describe."""

    arn: str
    domain_name: str
    status: str
    subject_alternative_names: frozenset[str] = field(default_factory=frozenset)
    domain_validations: tuple[DomainValidation, ...] = ()

    def covers(self, alternative_names: tuple[str, ...]) -> bool:
        """True when every requested alternative name is on this certificate."""
        return set(alternative_names) <= self.subject_alternative_names

    @property
    def ready_validations(self) -> tuple[DomainValidation, ...]:
        return tuple(v for v in self.domain_validations if v.is_ready)

    @property
    def validated_count(self) -> int:
        return sum(1 for v in self.domain_validations if v.is_validated)

    @property
    def awaiting_challenges(self) -> tuple[DomainValidation, ...]:
        """Validations that are neither ready to publish nor already validated."""
        return tuple(
            v for v in self.domain_validations if not (v.is_ready or v.is_validated)
        )


@dataclass(frozen=True, slots=True)
class HostedZone:
    """A Route 53 hosted zone. ``name`` keeps Route 53's trailing dot."""

    id: str
    name: str
    private: bool = False

    @property
    def normalized_name(self) -> str:
        return normalize_domain(self.name)


@dataclass(frozen=True, slots=True)
class HostedZonePage:
    """One page of ListHostedZones, with its continuation marker."""

    zones: tuple[HostedZone, ...]
    is_truncated: bool = False
    next_marker: str | None = None


@dataclass(frozen=True, slots=True)
class DnsChange:
    """
    A single UPSERT of a validation record into a hosted zone.

    Always UPSERT so that re-running a deployment never fails on a record
    that a previous run already created.
    """

    zone_id: str
    record: ResourceRecord
    ttl: int = VALIDATION_RECORD_TTL
    comment: str = CHANGE_COMMENT

    def to_change_batch(self) -> dict[str, Any]:
        return {
            "Comment": self.comment,
            "Changes": [
                {
                    "Action": "UPSERT",
                    "ResourceRecordSet": {
                        "Name": self.record.name,
                        "Type": self.record.type,
                        "TTL": self.ttl,
                        "ResourceRecords": [{"Value": self.record.value}],
                    },
                }
            ],
        }


@dataclass(frozen=True, slots=True)
class ViewerCertificate:
    """The ViewerCertificate block written into the CloudFront distribution."""

    acm_certificate_arn: str
    minimum_protocol_version: str | None = None
    ssl_support_method: str = SSL_SUPPORT_METHOD

    def to_template(self) -> dict[str, str]:
        block = {
            "AcmCertificateArn": self.acm_certificate_arn,
            "SslSupportMethod": self.ssl_support_method,
        }
        if self.minimum_protocol_version:
            block["MinimumProtocolVersion"] = self.minimum_protocol_version
        return block


@dataclass(frozen=True, slots=True)
class ProvisioningContext:
    """
    Request-scoped state threaded through the pipeline stages.

    Built once from settings; ``with_certificate`` returns a copy carrying
    the ARN once the provisioner has found or requested one.
    """

    domains: DomainSet
    distribution_resource: str
    minimum_protocol_version: str | None = None
    validation_retries: int = 31
    issuance_attempts: int = 15
    wait_for_issuance: bool = True
    certificate_arn: str | None = None

    def with_certificate(self, arn: str) -> ProvisioningContext:
        return replace(self, certificate_arn=arn)

    def require_certificate(self) -> str:
        if not self.certificate_arn:
            raise ValueError("No certificate ARN on the provisioning context")
        return self.certificate_arn


@dataclass(frozen=True, slots=True)
class RunReport:
    """What a certificate run did, returned on the success track."""

    certificate_arn: str | None = None
    records_published: int = 0
    viewer_certificate: ViewerCertificate | None = None
    skipped: bool = False
